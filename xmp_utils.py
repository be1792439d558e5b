from exif_utils import (
    degrees_decimal_to_degrees_minutes_seconds,
    number_to_exif_rational,
    to_rational,
)
from rational import Rational


def degrees_decimal_to_degrees_minutes_seconds_xmp(degrees_decimal) -> str:
    degrees, minutes, seconds = degrees_decimal_to_degrees_minutes_seconds(
        degrees_decimal
    )
    return (
        str(abs(degrees.numerator))
        + ","
        + str(abs(minutes.numerator))
        + ","
        + str(abs(seconds.to_float()))
    )


def number_to_xmp_rational(number, max_denominator: int = 1000) -> str:
    numerator, denominator = number_to_exif_rational(number, max_denominator)
    return str(numerator) + "/" + str(denominator)


def xmp_rational_to_rational(text: str) -> Rational:
    return Rational.parse(text)


def xmp_xml(altitude, latitude, longitude) -> str:
    latitude = to_rational(latitude)
    longitude = to_rational(longitude)
    altitude_xmp = number_to_xmp_rational(altitude)
    latitude_xmp = degrees_decimal_to_degrees_minutes_seconds_xmp(latitude) + (
        "S" if latitude.numerator < 0 else "N"
    )
    longitude_xmp = degrees_decimal_to_degrees_minutes_seconds_xmp(longitude) + (
        "W" if longitude.numerator < 0 else "E"
    )
    return f"""<?xpacket begin='' id='W5M0MpCehiHzreSzNTczkc9d'?>
    <x:xmpmeta xmlns:x='adobe:ns:meta/'>
    <rdf:RDF xmlns:rdf='http://www.w3.org/1999/02/22-rdf-syntax-ns#'>
      <rdf:Description rdf:about='' xmlns:exif='http://ns.adobe.com/exif/1.0/'>
        <exif:GPSAltitude>{altitude_xmp}</exif:GPSAltitude>
        <exif:GPSLatitude>{latitude_xmp}</exif:GPSLatitude>
        <exif:GPSLongitude>{longitude_xmp}</exif:GPSLongitude>
      </rdf:Description>
    </rdf:RDF>
    </x:xmpmeta>
    <?xpacket end='w'?>"""
