import dataclasses
import json

import humanfriendly
import numpy as np

from . import constants


def display_size(n):
    return humanfriendly.format_size(n, binary=True)


def float_notation(text):
    """
    Return the notation a float was written in, so that it can be
    rendered back the same way.
    """
    if "e" in text or "E" in text:
        return constants.QUAL_FORMAT_EXPONENT
    return constants.QUAL_FORMAT_FIXED


def format_float(value, notation=constants.QUAL_FORMAT_FIXED):
    """
    Format the specified float using the shortest representation that
    round-trips, in either fixed ("f") or exponent ("e") notation.
    Exponents always have at least two digits (1e+20, 1.5e-05).
    """
    if notation == constants.QUAL_FORMAT_EXPONENT:
        return np.format_float_scientific(value, trim="-", exp_digits=2)
    return np.format_float_positional(value, trim="-")


def parse_float(text, default):
    """
    Parse a float, returning default for anything that isn't one. Only
    ASCII text without "_" digit separators is accepted.
    """
    if not text.isascii() or "_" in text:
        return default
    try:
        return float(text)
    except ValueError:
        return default


def parse_uint(text):
    """
    Parse an unsigned integer, returning POS_MISSING for anything
    that isn't one.
    """
    if not (text.isascii() and text.isdigit()):
        return constants.POS_MISSING
    return int(text)


class JsonDataclass:
    def asdict(self):
        return dataclasses.asdict(self)

    def asjson(self):
        return json.dumps(self.asdict(), indent=4)
