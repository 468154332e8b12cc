import pytest

from flightcolorizer.colorize.assigner import assign_colors
from flightcolorizer.colorize.flights import group_flights
from flightcolorizer.colorize.legend import LegendEntry, build_legend
from flightcolorizer.colorize.palette import DEFAULT_PALETTE, flight_color
from flightcolorizer.colorize.properties import resolve_property_indices
from flightcolorizer.colorize.scanner import scan_pilots


@pytest.mark.parametrize("palette_size", [1, 2, 3, 10])
def test_flight_color_cycles_through_palette(palette_size):
    palette = [f"C{i}" for i in range(1, palette_size + 1)]
    for index in range(1, 25):
        assert flight_color(index, palette) == palette[(index - 1) % palette_size]


def test_flight_color_without_palette():
    assert flight_color(1, []) is None


def _assign(source, drive, palette):
    indices = resolve_property_indices(source)
    pilots, _ = drive(scan_pilots(source, indices, True))
    flights = group_flights(pilots)
    assignment, _ = drive(assign_colors(source, indices.color, pilots, flights, palette))
    return assignment, flights


def test_writes_color_at_begin_and_write_time(recording, drive):
    viper = recording.aircraft("Viper11", begin=5.0, end=100.0)
    dog = recording.aircraft("Dog11", begin=0.0, end=50.0)

    assignment, _ = _assign(recording.source, drive, ["C1", "C2"])

    assert assignment.colored == 2
    assert assignment.skipped == 0
    assert recording.source.samples(dog, "Color") == [(0.0, "C1"), (50.0, "C1")]
    assert recording.source.samples(viper, "Color") == [(5.0, "C2"), (100.0, "C2")]
    assert assignment.call_sign_colors == {"Dog11": "C1", "Viper11": "C2"}


def test_single_write_without_lifetime_begin(recording, drive):
    h = recording.aircraft("Viper11", begin=None, end=30.0)

    _assign(recording.source, drive, ["C1"])

    assert recording.source.samples(h, "Color") == [(30.0, "C1")]


def test_empty_palette_skips_everything(recording, drive):
    h = recording.aircraft("Viper11")
    recording.aircraft("Dog11")

    assignment, _ = _assign(recording.source, drive, [])

    assert assignment.colored == 0
    assert assignment.skipped == 2
    assert assignment.call_sign_colors == {}
    assert recording.source.samples(h, "Color") == []


def test_reassignment_is_idempotent(recording, drive):
    handles = [recording.aircraft(cs) for cs in ("Viper11", "Viper12", "Dog11", "Hawg21")]

    first, _ = _assign(recording.source, drive, ["C1", "C2"])
    colors = [recording.source.samples(h, "Color") for h in handles]
    second, _ = _assign(recording.source, drive, ["C1", "C2"])

    assert second.call_sign_colors == first.call_sign_colors
    assert [recording.source.samples(h, "Color") for h in handles] == colors


def test_name_only_pilots_are_colored_but_not_mapped(recording, drive):
    h = recording.aircraft(None, Name="Cowboy21")

    assignment, _ = _assign(recording.source, drive, ["C1"])

    assert assignment.colored == 1
    assert assignment.call_sign_colors == {}
    assert recording.source.samples(h, "Color")[0] == (0.0, "C1")


# ---------------------------------------- #


def test_legend_takes_first_ten_flights(recording, drive):
    for n in range(1, 13):
        recording.aircraft(f"Flight{n:02d}1")

    _, flights = _assign(recording.source, drive, DEFAULT_PALETTE)
    legend = build_legend(flights, DEFAULT_PALETTE)

    assert len(legend) == 10
    assert legend[0] == LegendEntry("Flight011", "P1")
    assert legend[-1] == LegendEntry("Flight101", "P10")


def test_legend_without_palette_has_no_colors(recording, drive):
    recording.aircraft("Viper12")

    _, flights = _assign(recording.source, drive, [])
    assert build_legend(flights, []) == (LegendEntry("Viper12", None),)
