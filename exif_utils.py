import datetime
from fractions import Fraction
import logging
import numbers

from dateutil import parser
import piexif

from rational import Rational

logger = logging.getLogger(__name__)


def to_rational(value) -> Rational:
    if isinstance(value, Rational):
        return value
    if isinstance(value, int):
        return Rational.from_int(value)
    if isinstance(value, float):
        return Rational.from_float(value)
    if isinstance(value, str):
        return Rational.parse(value)
    if isinstance(value, tuple) and len(value) == 2:
        return Rational(*value)
    if isinstance(value, numbers.Rational):
        return Rational(value.numerator, value.denominator)
    if isinstance(value, numbers.Real):
        return Rational.from_float(float(value))
    raise TypeError(f"Cannot convert {type(value).__name__} to a rational")


def _absolute(rational: Rational) -> Rational:
    return Rational(abs(rational.numerator), rational.denominator)


def _negate(rational: Rational) -> Rational:
    return Rational(-rational.numerator, rational.denominator)


def _require_finite(rational: Rational):
    if rational.denominator == 0:
        raise ValueError(f"EXIF has no encoding for the rational value '{rational}'")


def degrees_decimal_to_degrees_minutes_seconds(
    degrees_decimal,
) -> tuple[Rational, Rational, Rational]:
    degrees_decimal = to_rational(degrees_decimal)
    _require_finite(degrees_decimal)
    sign = -1 if degrees_decimal.numerator < 0 else 1
    denominator = degrees_decimal.denominator
    degrees, remainder = divmod(abs(degrees_decimal.numerator), denominator)
    minutes, remainder = divmod(remainder * 60, denominator)
    return (
        Rational(degrees * sign),
        Rational(minutes * sign),
        Rational(remainder * 60 * sign, denominator),
    )


def number_to_exif_rational(number, max_denominator: int = 1000) -> tuple[int, int]:
    rational = to_rational(number)
    _require_finite(rational)
    fraction = Fraction(rational.numerator, rational.denominator).limit_denominator(
        max_denominator
    )
    return fraction.numerator, fraction.denominator


def exif_rational_to_rational(pair: tuple[int, int]) -> Rational:
    numerator, denominator = pair
    return Rational(numerator, denominator)


def _degrees_minutes_seconds_to_exif(degrees_decimal: Rational, max_denominator: int):
    return tuple(
        number_to_exif_rational(_absolute(component), max_denominator)
        for component in degrees_decimal_to_degrees_minutes_seconds(degrees_decimal)
    )


def _exif_to_degrees_decimal(degrees_minutes_seconds) -> Rational:
    degrees, minutes, seconds = (
        exif_rational_to_rational(pair) for pair in degrees_minutes_seconds
    )
    for component in (degrees, minutes, seconds):
        _require_finite(component)
    # d + m/60 + s/3600 over a common denominator
    denominator = degrees.denominator * minutes.denominator * seconds.denominator
    numerator = (
        degrees.numerator * minutes.denominator * seconds.denominator * 3600
        + minutes.numerator * degrees.denominator * seconds.denominator * 60
        + seconds.numerator * degrees.denominator * minutes.denominator
    )
    return Rational(numerator, denominator * 3600)


def gps_exif_metadata(
    altitude,
    latitude,
    longitude,
    timestamp: str | None = None,
    max_denominator: int = 1000,
) -> dict:
    altitude = to_rational(altitude)
    latitude = to_rational(latitude)
    longitude = to_rational(longitude)

    gps_exif = {
        piexif.GPSIFD.GPSVersionID: (2, 3, 0, 0),
        piexif.GPSIFD.GPSAltitude: number_to_exif_rational(
            _absolute(altitude), max_denominator
        ),
        piexif.GPSIFD.GPSAltitudeRef: 1 if altitude.numerator < 0 else 0,
        piexif.GPSIFD.GPSLatitude: _degrees_minutes_seconds_to_exif(
            latitude, max_denominator
        ),
        piexif.GPSIFD.GPSLatitudeRef: "S" if latitude.numerator < 0 else "N",
        piexif.GPSIFD.GPSLongitude: _degrees_minutes_seconds_to_exif(
            longitude, max_denominator
        ),
        piexif.GPSIFD.GPSLongitudeRef: "W" if longitude.numerator < 0 else "E",
    }

    if timestamp is not None:
        fix_time = parser.parse(timestamp)
        # GPS time stamps are always UTC.
        if fix_time.tzinfo is not None:
            fix_time = fix_time.astimezone(datetime.timezone.utc)
        gps_exif[piexif.GPSIFD.GPSDateStamp] = fix_time.strftime("%Y:%m:%d")
        gps_exif[piexif.GPSIFD.GPSTimeStamp] = (
            number_to_exif_rational(fix_time.hour),
            number_to_exif_rational(fix_time.minute),
            number_to_exif_rational(
                Rational(fix_time.second * 1000000 + fix_time.microsecond, 1000000),
                max_denominator,
            ),
        )

    logger.debug(f"Exif GPS metadata: {gps_exif}")
    return gps_exif


def _reference(gps_exif: dict, tag: int, default: str) -> str:
    value = gps_exif.get(tag, default)
    # piexif.load returns ASCII values as bytes.
    if isinstance(value, bytes):
        return value.decode("ASCII").rstrip("\x00")
    return value


def read_gps_exif_metadata(gps_exif: dict) -> dict[str, Rational]:
    metadata = {}

    if piexif.GPSIFD.GPSAltitude in gps_exif:
        altitude = exif_rational_to_rational(gps_exif[piexif.GPSIFD.GPSAltitude])
        _require_finite(altitude)
        if gps_exif.get(piexif.GPSIFD.GPSAltitudeRef, 0) == 1:
            altitude = _negate(altitude)
        metadata["altitude"] = altitude

    if piexif.GPSIFD.GPSLatitude in gps_exif:
        latitude = _exif_to_degrees_decimal(gps_exif[piexif.GPSIFD.GPSLatitude])
        if _reference(gps_exif, piexif.GPSIFD.GPSLatitudeRef, "N") == "S":
            latitude = _negate(latitude)
        metadata["latitude"] = latitude

    if piexif.GPSIFD.GPSLongitude in gps_exif:
        longitude = _exif_to_degrees_decimal(gps_exif[piexif.GPSIFD.GPSLongitude])
        if _reference(gps_exif, piexif.GPSIFD.GPSLongitudeRef, "E") == "W":
            longitude = _negate(longitude)
        metadata["longitude"] = longitude

    logger.debug(f"Decoded Exif GPS metadata: {metadata}")
    return metadata
