from flightcolorizer.colorize.legend import EMPTY_LEGEND, LegendEntry
from flightcolorizer.ui.legend_overlay import PLACEHOLDER_LINES, LegendOverlayWidget


def test_placeholder_before_first_run():
    w = LegendOverlayWidget()
    assert [text for text, _ in w.visible_lines()] == list(PLACEHOLDER_LINES)


def test_legend_lines_with_swatches():
    w = LegendOverlayWidget()
    w.set_swatch_colors({"P1": 0xFF0080FF})
    w.set_legend((LegendEntry("Viper11", "P1"), LegendEntry("Dog11", "P2"), LegendEntry("Hawg21", None)))

    assert w.visible_lines() == [
        ("Viper11", "#FF8000"),
        ("Dog11", None),
        ("Hawg21", None),
    ]


def test_empty_legend_draws_nothing():
    w = LegendOverlayWidget()
    w.set_legend(EMPTY_LEGEND)
    assert w.visible_lines() == []


def test_hidden_legend():
    w = LegendOverlayWidget()
    w.set_legend((LegendEntry("Viper11", "P1"),))
    w.set_show_legend(False)
    assert w.visible_lines() == []


def test_paints_legend_and_banner():
    w = LegendOverlayWidget()
    w.resize(480, 320)
    w.set_swatch_colors({"P1": 0xFF0080FF})
    w.set_legend((LegendEntry("Viper11", "P1"),))
    w.set_processing(True)

    pixmap = w.grab()
    assert not pixmap.isNull()
    assert pixmap.width() == 480
