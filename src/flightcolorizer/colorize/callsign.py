from __future__ import annotations

import re
from typing import NamedTuple

# <prefix><flightDigit><shipDigit>, e.g. Viper14, Dog11, Nightwing53
_CALL_SIGN_RE = re.compile(r"(.+)([0-9])([0-9])")
_WHITESPACE_RE = re.compile(r"\s+")

MIN_SHIP_INDEX = 1
MAX_SHIP_INDEX = 4


class FlightIdentity(NamedTuple):
    flight_key: str
    ship_index: int


def parse_call_sign(call_sign: str | None) -> FlightIdentity | None:
    """
    Split a call sign into its flight key and ship index.

    Ships of one flight share the key: "Viper14" -> ("Viper1", 4).
    Returns None for anything that does not look like a flight member.
    """
    if not isinstance(call_sign, str):
        return None

    compact = _WHITESPACE_RE.sub("", call_sign)
    if not compact:
        return None

    match = _CALL_SIGN_RE.fullmatch(compact)
    if match is None:
        return None

    prefix, flight_digit, ship_digit = match.groups()
    ship_index = int(ship_digit)
    if not MIN_SHIP_INDEX <= ship_index <= MAX_SHIP_INDEX:
        return None

    return FlightIdentity(prefix + flight_digit, ship_index)
