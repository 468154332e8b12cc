from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from flightcolorizer.colorize.legend import LegendModel
from flightcolorizer.colorize.palette import swatch_hex

PLACEHOLDER_LINES = (
    "Flight Colorizer",
    "Legend enabled",
    "Run: Assign Colors Now",
)

PROCESSING_TEXT = "Processing recording..."

FONT_SIZE = 11
LINE_HEIGHT = FONT_SIZE + 7
PADDING = 10
SWATCH_SIZE = 10


class LegendOverlayWidget(QtWidgets.QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._legend: LegendModel | None = None
        self._swatch_colors: dict[str, int] = {}
        self._processing: bool = False
        self._show_legend: bool = True

        self.setMinimumSize(320, 200)
        self.setAutoFillBackground(True)

    # ---------------------------------------- #

    @QtCore.Slot(object)
    def set_legend(self, legend: LegendModel) -> None:
        self._legend = legend
        self.update()

    @QtCore.Slot(bool)
    def set_processing(self, on: bool) -> None:
        self._processing = on
        self.update()

    def set_show_legend(self, on: bool) -> None:
        self._show_legend = on
        self.update()

    def set_swatch_colors(self, colors: dict[str, int]) -> None:
        self._swatch_colors = dict(colors)
        self.update()

    # ---------------------------------------- #

    def visible_lines(self) -> list[tuple[str, str | None]]:
        """(text, swatch "#RRGGBB" or None) for each line the overlay draws."""
        if not self._show_legend:
            return []
        if self._legend is None:
            return [(line, None) for line in PLACEHOLDER_LINES]
        return [
            (
                entry.label,
                swatch_hex(self._swatch_colors.get(entry.color_id))
                if entry.color_id is not None
                else None,
            )
            for entry in self._legend
        ]

    # ---------------------------------------- #

    def paintEvent(self, e: QtGui.QPaintEvent) -> None:
        p = QtGui.QPainter(self)
        p.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)

        p.fillRect(self.rect(), QtGui.QColor("#0b0f14"))

        font = QtGui.QFont()
        font.setPointSize(FONT_SIZE)
        font.setBold(True)
        p.setFont(font)
        fm = QtGui.QFontMetrics(font)

        lines = self.visible_lines()
        if lines:
            self._draw_legend(p, fm, lines)

        if self._processing:
            self._draw_processing(p)

    def _draw_legend(
        self,
        p: QtGui.QPainter,
        fm: QtGui.QFontMetrics,
        lines: list[tuple[str, str | None]],
    ) -> None:
        # Anchored to the bottom-left corner, first line on top.
        text_x = PADDING + SWATCH_SIZE + 8
        width = max(180, text_x + max(fm.horizontalAdvance(t) for t, _ in lines) + PADDING)
        height = PADDING * 2 + LINE_HEIGHT * len(lines)
        panel = QtCore.QRect(PADDING, self.height() - PADDING - height, width, height)

        p.fillRect(panel, QtGui.QColor(0, 0, 0, 128))
        p.setPen(QtGui.QPen(QtGui.QColor("#1b2a34"), 1))
        p.drawRect(panel)

        for i, (text, swatch) in enumerate(lines):
            baseline = panel.top() + PADDING + LINE_HEIGHT * (i + 1) - 4
            if swatch is not None:
                r = QtCore.QRect(
                    panel.left() + PADDING,
                    baseline - SWATCH_SIZE,
                    SWATCH_SIZE,
                    SWATCH_SIZE,
                )
                p.fillRect(r, QtGui.QColor(swatch))

            p.setPen(QtGui.QColor("#c8d2dc"))
            p.drawText(panel.left() + text_x, baseline, text)

    def _draw_processing(self, p: QtGui.QPainter) -> None:
        font = QtGui.QFont()
        font.setPointSize(FONT_SIZE * 2)
        font.setBold(True)
        p.setFont(font)
        fm = QtGui.QFontMetrics(font)

        w = fm.horizontalAdvance(PROCESSING_TEXT)
        h = fm.height()
        c = self.rect().center()
        r = QtCore.QRect(c.x() - w // 2 - 14, c.y() - h // 2 - 14, w + 28, h + 28)

        p.fillRect(r, QtGui.QColor(0, 0, 0, 128))
        p.setPen(QtGui.QColor("#ffffff"))
        p.drawText(r, QtCore.Qt.AlignmentFlag.AlignCenter, PROCESSING_TEXT)
