from flightcolorizer.colorize.fixups import fix_model_names
from flightcolorizer.colorize.properties import resolve_property_indices


def _fix(source, drive, fixed_wing_only=True):
    indices = resolve_property_indices(source)
    fixed, _ = drive(fix_model_names(source, indices, fixed_wing_only))
    return fixed


def test_short_model_name_is_rewritten(recording, drive):
    eagle = recording.aircraft("Viper11", Name="F-15C")
    viper = recording.aircraft("Viper12", Name="F-16C")

    assert _fix(recording.source, drive) == 1
    assert recording.source.samples(eagle, "Name") == [(0.0, "F-15C Eagle"), (100.0, "F-15C Eagle")]
    assert recording.source.samples(viper, "Name") == [(0.0, "F-16C")]


def test_fixed_wing_filter_applies(recording, drive):
    h = recording.aircraft("Viper11", type_name="Ground+Static", Name="F-15C")

    assert _fix(recording.source, drive, fixed_wing_only=True) == 0
    assert _fix(recording.source, drive, fixed_wing_only=False) == 1
    assert recording.source.samples(h, "Name")[-1] == (100.0, "F-15C Eagle")
