#!/usr/bin/env python3
import logging
import sys

import configargparse

from exif_utils import number_to_exif_rational
from rational import MalformedNumberError, Rational

logger = logging.getLogger(__name__)


def classify(rational: Rational) -> str:
    if rational.is_indeterminate():
        return "indeterminate"
    if rational.is_positive_infinity():
        return "positive infinity"
    if rational.is_negative_infinity():
        return "negative infinity"
    if rational.is_zero():
        return "zero"
    if rational.is_one():
        return "one"
    if rational.is_integer():
        return "integer"
    return "fraction"


def describe(
    rational: Rational,
    format_spec: str = "",
    exif: bool = False,
    max_denominator: int = 1000,
) -> str:
    fields = [
        rational.to_text(format_spec),
        repr(rational.to_float()),
        classify(rational),
    ]
    if exif:
        if rational.denominator == 0:
            fields.append("-")
        else:
            numerator, denominator = number_to_exif_rational(
                rational, max_denominator
            )
            fields.append(f"({numerator}, {denominator})")
    return "\t".join(fields)


def configure_logging(log_level: str):
    numeric_log_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_log_level, int):
        raise ValueError(f"Invalid log level: {log_level}")
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    for name in (__name__, "rational", "exif_utils"):
        if not logging.getLogger(name).handlers:
            logging.getLogger(name).addHandler(handler)
        logging.getLogger(name).setLevel(numeric_log_level)


def build_parser():
    parser = configargparse.ArgParser(
        default_config_files=[
            "exifrational.toml",
            "~/.config/exifrational/config.toml",
            "/usr/local/etc/exifrational/config.toml",
            "/etc/exifrational/config.toml",
        ],
        config_file_parser_class=configargparse.TomlConfigParser(["exifrational"]),
        description="Show how numbers are stored as exact rationals.",
    )
    parser.add_argument(
        "values",
        nargs="+",
        help="Numbers to inspect like '22/7', '3.14159' or '6.25E-2'.",
    )
    parser.add_argument(
        "--exif",
        help="Also show the closest EXIF numerator and denominator pair.",
        action="store_true",
        env_var="EXIFRATIONAL_EXIF",
    )
    parser.add_argument(
        "--format",
        help="The integer format specification used to render numerators and denominators, like ','.",
        default="",
        env_var="EXIFRATIONAL_FORMAT",
    )
    parser.add_argument(
        "--log-level",
        help="The log level, i.e. debug, info, warning, error, critical",
        default="warning",
        env_var="EXIFRATIONAL_LOG_LEVEL",
    )
    parser.add_argument(
        "--max-denominator",
        help="The largest denominator to use for EXIF pairs.",
        default=1000,
        type=int,
        env_var="EXIFRATIONAL_MAX_DENOMINATOR",
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    if args.max_denominator < 1:
        logger.warning(
            f"The max denominator must be at least 1. Ignoring the provided max denominator of '{args.max_denominator}'."
        )
        args.max_denominator = 1000

    status = 0
    for value in args.values:
        try:
            rational = Rational.parse(value)
        except MalformedNumberError as exc:
            logger.error(f"Unable to parse '{value}': {exc}")
            status = 1
            continue
        logger.debug(f"Parsed '{value}' as {rational!r}")
        print(describe(rational, args.format, args.exif, args.max_denominator))
    return status


if __name__ == "__main__":
    sys.exit(main())
