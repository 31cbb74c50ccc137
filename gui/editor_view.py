# gui/editor_view.py
"""
Adapter that gives a QPlainTextEdit the small view capability set the scroll-sync
coordinator needs: scrollToLine(line, align) and a signal reporting the top line.

With line wrapping disabled, the vertical scrollbar of a QPlainTextEdit counts text
blocks, so its value is the 0-based index of the first visible line.
"""
import logging
from typing import Optional, Tuple

from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QColor, QTextCursor, QTextFormat
from PySide6.QtWidgets import QPlainTextEdit, QTextEdit

from core.line_mapper import clampLineRange
from core.scroll_sync import ScrollAlign, ScrollInfo

logger: logging.Logger = logging.getLogger(__name__)

GHOST_RANGE_COLOR: str = "#fff5b1" # Lines of the hunk under the mouse


class EditorView(QObject):
	"""
	Wraps one editor pane.

	Signals:
		scrolled (object): Emits a ScrollInfo each time the top visible line changes.
	"""
	scrolled = Signal(object)

	def __init__(self: 'EditorView', editor: QPlainTextEdit, parent: Optional[QObject] = None) -> None:
		super().__init__(parent)
		self._editor: QPlainTextEdit = editor
		self._editor.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
		self._editor.verticalScrollBar().valueChanged.connect(self._onScrollValueChanged)
		self._ghostRange: Optional[Tuple[int, int]] = None

	@property
	def editor(self: 'EditorView') -> QPlainTextEdit:
		return self._editor

	def lineCount(self: 'EditorView') -> int:
		return self._editor.blockCount()

	def topLine(self: 'EditorView') -> int:
		return self._editor.verticalScrollBar().value()

	def visibleLineCount(self: 'EditorView') -> int:
		lineHeight: int = max(1, self._editor.fontMetrics().lineSpacing())
		return max(1, self._editor.viewport().height() // lineHeight)

	def scrollToLine(self: 'EditorView', line: int, align: ScrollAlign = ScrollAlign.TOP) -> None:
		"""
		Scrolls so that the 0-based `line` lands at the top, in the center, or just
		inside the viewport (nearest). The scrollbar clamps out-of-range targets.
		"""
		scrollBar = self._editor.verticalScrollBar()
		visible: int = self.visibleLineCount()
		top: int = scrollBar.value()
		align = ScrollAlign(align)

		if align == ScrollAlign.CENTER:
			target = line - visible // 2
		elif align == ScrollAlign.NEAREST:
			if top <= line < top + visible:
				return
			target = line if line < top else line - visible + 1
		else:
			target = line
		scrollBar.setValue(max(scrollBar.minimum(), min(scrollBar.maximum(), target)))

	@property
	def ghostRange(self: 'EditorView') -> Optional[Tuple[int, int]]:
		return self._ghostRange

	def setGhostRange(self: 'EditorView', lineRange: Optional[Tuple[int, int]]) -> None:
		"""
		Shades the inclusive 0-based line range (full width), or clears the shading
		when None. The range is clamped to the current document.
		"""
		clamped = clampLineRange(lineRange, self.lineCount())
		if clamped == self._ghostRange:
			return
		self._ghostRange = clamped
		selections = []
		if clamped is not None:
			document = self._editor.document()
			firstBlock = document.findBlockByNumber(clamped[0])
			lastBlock = document.findBlockByNumber(clamped[1])
			selection = QTextEdit.ExtraSelection()
			selection.format.setBackground(QColor(GHOST_RANGE_COLOR))
			selection.format.setProperty(QTextFormat.Property.FullWidthSelection, True)
			cursor = QTextCursor(firstBlock)
			cursor.setPosition(lastBlock.position() + max(0, lastBlock.length() - 1), QTextCursor.MoveMode.KeepAnchor)
			selection.cursor = cursor
			selections.append(selection)
		self._editor.setExtraSelections(selections)

	def _onScrollValueChanged(self: 'EditorView', value: int) -> None:
		self.scrolled.emit(ScrollInfo(topLine=value))
