import pytest

from flightcolorizer.colorize.objects import ObjectView
from flightcolorizer.colorize.properties import resolve_property_indices
from flightcolorizer.colorize.scanner import scan_pilots
from flightcolorizer.telemetry.source import Lifetime


def _scan(source, drive, fixed_wing_only=True, batch_size=300):
    indices = resolve_property_indices(source)
    return drive(scan_pilots(source, indices, fixed_wing_only, batch_size=batch_size))


def test_scans_pilots_in_enumeration_order(recording, drive):
    recording.aircraft("Viper12", pilot="P2")
    recording.aircraft("Dog11", pilot="P3")
    recording.aircraft("Viper11", pilot="P1")

    pilots, _ = _scan(recording.source, drive)

    assert [p.call_sign for p in pilots] == ["Viper12", "Dog11", "Viper11"]
    assert [(p.flight_key, p.ship_index) for p in pilots] == [
        ("Viper1", 2),
        ("Dog1", 1),
        ("Viper1", 1),
    ]
    assert pilots[0].lifetime_begin == 0.0
    assert pilots[0].write_time == 100.0


def test_skips_objects_without_pilot(recording, drive):
    recording.aircraft("Viper11", pilot="")
    recording.aircraft("Viper12", pilot="Someone")

    pilots, _ = _scan(recording.source, drive)
    assert [p.call_sign for p in pilots] == ["Viper12"]


def test_fixed_wing_filter(recording, drive):
    recording.aircraft("Viper11")
    recording.aircraft("Chopper11", type_name="Air+Rotorcraft")

    only_fixed, _ = _scan(recording.source, drive, fixed_wing_only=True)
    everything, _ = _scan(recording.source, drive, fixed_wing_only=False)

    assert [p.call_sign for p in only_fixed] == ["Viper11"]
    assert [p.call_sign for p in everything] == ["Viper11", "Chopper11"]


def test_call_sign_falls_back_to_lifetime_begin(recording, drive):
    h = recording.aircraft("Viper11")
    recording.source.set_property(h, "CallSign", "", 100.0)

    pilots, _ = _scan(recording.source, drive)
    assert pilots[0].call_sign == "Viper11"


def test_call_sign_falls_back_to_name(recording, drive):
    recording.aircraft(None, Name="Cowboy21")
    recording.aircraft("garbage", Name="Cowboy22")

    pilots, _ = _scan(recording.source, drive)

    assert [(p.call_sign, p.flight_key, p.ship_index) for p in pilots] == [
        ("", "Cowboy2", 1),
        ("garbage", "Cowboy2", 2),
    ]


def test_unparseable_and_lifetimeless_objects_are_dropped(recording, drive):
    recording.aircraft("Viper15")
    recording.aircraft("Tanker")
    recording.aircraft("Viper11", begin=None, end=None)
    recording.aircraft("Viper12", begin=None, end=40.0)

    pilots, _ = _scan(recording.source, drive)

    assert [p.call_sign for p in pilots] == ["Viper12"]
    assert pilots[0].lifetime_begin is None
    assert pilots[0].write_time == 40.0


def test_yields_every_batch_of_objects(recording, drive):
    for n in range(1, 6):
        recording.aircraft(f"Viper1{n % 4 + 1}")

    pilots, yields = _scan(recording.source, drive, batch_size=2)
    assert len(pilots) == 5
    assert yields == 2


def test_object_view_without_lifetime_refuses_reads(recording):
    handle = recording.source.add_object(None, None)
    obj = ObjectView(handle, Lifetime(None), read_time=None)
    index = recording.source.property_index("Pilot")

    with pytest.raises(ValueError):
        obj.final_text(recording.source, index)
    with pytest.raises(ValueError):
        obj.text(recording.source, index)
