from flightcolorizer.colorize.flights import (
    FlightGroup,
    group_flights,
    representative_call_signs,
    sorted_flight_keys,
)
from flightcolorizer.colorize.scanner import ScannedPilot


def _pilot(call_sign, flight_key, ship_index, handle=1):
    return ScannedPilot(
        handle=handle,
        lifetime_begin=0.0,
        write_time=100.0,
        pilot="P",
        call_sign=call_sign,
        flight_key=flight_key,
        ship_index=ship_index,
    )


def test_flight_keys_sorted_and_deduplicated():
    pilots = [
        _pilot("Viper12", "Viper1", 2),
        _pilot("Dog11", "Dog1", 1),
        _pilot("Viper11", "Viper1", 1),
        _pilot("Cowboy23", "Cowboy2", 3),
    ]
    assert sorted_flight_keys(pilots) == ["Cowboy2", "Dog1", "Viper1"]


def test_representative_prefers_ship_one():
    pilots = [_pilot("Viper12", "Viper1", 2), _pilot("Viper11", "Viper1", 1)]
    assert representative_call_signs(pilots) == {"Viper1": "Viper11"}


def test_representative_without_ship_one_uses_smallest_ship():
    pilots = [_pilot("Viper13", "Viper1", 3), _pilot("Viper12", "Viper1", 2)]
    assert representative_call_signs(pilots) == {"Viper1": "Viper12"}


def test_representative_ties_keep_first_seen():
    pilots = [_pilot("Viper 12", "Viper1", 2), _pilot("Viper12", "Viper1", 2)]
    assert representative_call_signs(pilots) == {"Viper1": "Viper 12"}


def test_group_flights_indices_and_labels():
    pilots = [
        _pilot("Viper12", "Viper1", 2),
        _pilot("", "Dog1", 1),
        _pilot("Viper11", "Viper1", 1),
    ]

    flights = group_flights(pilots)

    assert flights == [
        FlightGroup("Dog1", 1, None),
        FlightGroup("Viper1", 2, "Viper11"),
    ]
    assert [f.label for f in flights] == ["Dog11", "Viper11"]


def test_grouping_is_reproducible():
    pilots = [_pilot(f"Flight{n}1", f"Flight{n}", 1) for n in (7, 3, 9, 1)]
    assert group_flights(pilots) == group_flights(list(pilots))
