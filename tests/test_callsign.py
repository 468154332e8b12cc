import pytest

from flightcolorizer.colorize.callsign import FlightIdentity, parse_call_sign


@pytest.mark.parametrize(
    "call_sign, expected",
    [
        ("Viper14", ("Viper1", 4)),
        ("Dog11", ("Dog1", 1)),
        ("Nightwing53", ("Nightwing5", 3)),
        (" Via 14 ", ("Via1", 4)),
        ("123", ("12", 3)),
    ],
)
def test_parses_flight_member(call_sign, expected):
    assert parse_call_sign(call_sign) == FlightIdentity(*expected)


@pytest.mark.parametrize(
    "call_sign",
    ["X05", "Viper10", "12", "", "   ", "Viper1", "Viper", None],
)
def test_rejects_non_flight_member(call_sign):
    assert parse_call_sign(call_sign) is None


def test_ships_of_one_flight_share_key():
    keys = {parse_call_sign(f"Hawg3{n}").flight_key for n in range(1, 5)}
    assert keys == {"Hawg3"}
