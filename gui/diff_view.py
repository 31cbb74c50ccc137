# gui/diff_view.py
"""
Module responsible for rendering the aligned side-by-side diff into the MainWindow.

Each hunk is aligned into rows (core.row_aligner) and emitted as an HTML table:
a hunk header row, then one row per aligned pair with line numbers on both sides.
Replace rows highlight the changed tokens; one-sided rows show a placeholder cell.
Each header carries a collapse toggle and a jump link (`toggle:N` and `jump:N`
hrefs) so a hunk can be folded down to its header. Also fills the hunk list used
for jump-to-change navigation and the statistics readout in the toolbar.
"""
import html
import logging
from typing import AbstractSet, List, Optional, Sequence, Tuple, TYPE_CHECKING

from PySide6.QtCore import Signal
from PySide6.QtGui import QMouseEvent
from PySide6.QtWidgets import QListWidget, QListWidgetItem, QWidget

from core.diff_models import AlignedHunk, DiffResult, LineOp, Row, RowCell, Token
from core.diff_stats import DiffStats, StatsMode, computeStats
from core.row_aligner import alignAllHunks

if TYPE_CHECKING:
	from .main_window import MainWindow

logger: logging.Logger = logging.getLogger(__name__)

# --- Constants ---

HTML_COLOR_ADDED_BG: str = "#e6ffed" # Background for added lines
HTML_COLOR_DELETED_BG: str = "#ffeef0" # Background for deleted lines
HTML_COLOR_ADDED_TOKEN_BG: str = "#acf2bd" # Inserted words inside a replace row
HTML_COLOR_DELETED_TOKEN_BG: str = "#fdb8c0" # Deleted words inside a replace row
HTML_COLOR_PLACEHOLDER_BG: str = "#f8f9fa"
HTML_COLOR_HUNK_HEADER_BG: str = "#f1f8ff"
HTML_COLOR_LINE_NUM: str = "#6c757d"
HTML_COLOR_TEXT: str = "#212529"
HTML_FONT_FAMILY: str = "'Courier New', Courier, monospace"

HTML_TEMPLATE: str = "<!DOCTYPE html><html><head><meta charset='UTF-8'>{style}</head><body>\n{body}\n</body></html>"


def _buildStyle(fontPt: int) -> str:
	return (
		f"<style>body{{margin:0;font-family:{HTML_FONT_FAMILY};font-size:{fontPt}pt;color:{HTML_COLOR_TEXT};}}"
		f"table{{border-collapse:collapse;width:100%;}}"
		f"td{{white-space:pre;padding:0 6px;vertical-align:top;}}"
		f"td.ln{{color:{HTML_COLOR_LINE_NUM};text-align:right;background-color:#f1f1f1;}}"
		f"td.equal{{background-color:#fff;}}"
		f"td.delete{{background-color:{HTML_COLOR_DELETED_BG};}}"
		f"td.insert{{background-color:{HTML_COLOR_ADDED_BG};}}"
		f"td.placeholder{{background-color:{HTML_COLOR_PLACEHOLDER_BG};}}"
		f"td.hunk{{background-color:{HTML_COLOR_HUNK_HEADER_BG};color:{HTML_COLOR_LINE_NUM};}}"
		f"td.hunk a{{text-decoration:none;}}"
		f"span.del{{background-color:{HTML_COLOR_DELETED_TOKEN_BG};}}"
		f"span.ins{{background-color:{HTML_COLOR_ADDED_TOKEN_BG};}}"
		f"</style>"
	)


def _escape(text: str) -> str:
	return html.escape(text).replace("\t", "&nbsp;" * 4) or "&nbsp;"


def renderTokens(tokens: Sequence[Token]) -> str:
	""" Renders a token sequence, wrapping deleted/inserted tokens in highlight spans. """
	parts: List[str] = []
	for token in tokens:
		escaped: str = _escape(token.text)
		if token.deleted:
			parts.append(f'<span class="del">{escaped}</span>')
		elif token.inserted:
			parts.append(f'<span class="ins">{escaped}</span>')
		else:
			parts.append(escaped)
	return "".join(parts) or "&nbsp;"


def _renderCell(cell: Optional[RowCell]) -> str:
	if cell is None:
		return '<td class="ln">&nbsp;</td><td class="placeholder">&nbsp;</td>'
	content: str = renderTokens(cell.tokens) if cell.tokens is not None else _escape(cell.text)
	return f'<td class="ln">{cell.ln}</td><td class="{cell.op.value}">{content}</td>'


def hunkHeader(aligned: AlignedHunk) -> str:
	""" Unified-diff style header built from the rows actually present in the hunk. """
	aCount: int = sum(1 for row in aligned.rows if row.left is not None)
	bCount: int = sum(1 for row in aligned.rows if row.right is not None)
	return f"@@ -{aligned.a_start},{aCount} +{aligned.b_start},{bCount} @@"


LINK_TOGGLE: str = "toggle"
LINK_JUMP: str = "jump"


def renderAlignedHunksHtml(alignedHunks: Sequence[AlignedHunk], fontPt: int = 10, collapsed: AbstractSet[int] = frozenset()) -> str:
	"""
	Generates the full side-by-side HTML document for a list of aligned hunks.

	Args:
		alignedHunks (Sequence[AlignedHunk]): Output of the row aligner.
		fontPt (int): Code font size in points.
		collapsed (AbstractSet[int]): Indices of hunks shown as their header only.

	Returns:
		str: Complete HTML document.
	"""
	if not alignedHunks:
		body = "<p style='padding:4px 10px;color:#6c757d;font-style:italic;'>No differences.</p>"
		return HTML_TEMPLATE.format(style=_buildStyle(fontPt), body=body)

	bodyLines: List[str] = ["<table>"]
	for index, aligned in enumerate(alignedHunks):
		isCollapsed: bool = index in collapsed
		toggle: str = f'<a href="{LINK_TOGGLE}:{index}" title="{"Expand" if isCollapsed else "Collapse"} hunk">{"&#9656;" if isCollapsed else "&#9662;"}</a>'
		title: str = f'<a href="{LINK_JUMP}:{index}" title="Center editors on this change">{html.escape(hunkHeader(aligned))}</a>'
		hidden: str = f" ({len(aligned.rows)} rows hidden)" if isCollapsed else ""
		bodyLines.append(f'<tr><td class="hunk" colspan="4"><a name="hunk-{index}"></a>{toggle} {title}{hidden}</td></tr>')
		if isCollapsed:
			continue
		for row in aligned.rows:
			bodyLines.append(f"<tr>{_renderCell(row.left)}{_renderCell(row.right)}</tr>")
	bodyLines.append("</table>")
	return HTML_TEMPLATE.format(style=_buildStyle(fontPt), body="\n".join(bodyLines))


def parseHunkLink(url: str) -> Optional[Tuple[str, int]]:
	""" Splits a header link such as 'toggle:3' into ('toggle', 3); anything else gives None. """
	action, sep, rest = (url or "").partition(":")
	if not sep or action not in (LINK_TOGGLE, LINK_JUMP) or not rest.isdigit():
		return None
	return action, int(rest)


def formatStats(stats: DiffStats, mode: StatsMode) -> Tuple[str, str]:
	""" Returns (label text, tooltip) for the toolbar statistics readout. """
	unit: str = "Lines" if StatsMode(mode) == StatsMode.CODER else "Words"
	text: str = f"+{stats.added}  -{stats.removed}  ={stats.unchanged}  |  {stats.similarity_pct}% similar"
	tooltip: str = f"{unit} added: {stats.added}\n{unit} removed: {stats.removed}\n{unit} unchanged: {stats.unchanged}"
	return text, tooltip


def _hunkLabel(aligned: AlignedHunk) -> str:
	firstChange: Optional[Row] = next((row for row in aligned.rows if row.left is None or row.right is None or row.left.op != LineOp.EQUAL), None)
	preview: str = ""
	if firstChange is not None:
		cell: Optional[RowCell] = firstChange.left or firstChange.right
		preview = cell.text.strip()[:40] if cell else ""
	return f"{hunkHeader(aligned)}  {preview}".rstrip()




class HunkListWidget(QListWidget):
	"""
	Hunk list that reports which row the mouse is over.

	Signals:
		hunkHovered (int): Row under the mouse, or -1 once the mouse leaves the rows.
	"""
	hunkHovered = Signal(int)

	def __init__(self: 'HunkListWidget', parent: Optional[QWidget] = None) -> None:
		super().__init__(parent)
		self.setMouseTracking(True)
		self._hoveredRow: int = -1

	def resetHover(self: 'HunkListWidget') -> None:
		self._setHoveredRow(-1)

	def mouseMoveEvent(self: 'HunkListWidget', event: QMouseEvent) -> None:
		self._setHoveredRow(self.indexAt(event.position().toPoint()).row())
		super().mouseMoveEvent(event)

	def leaveEvent(self: 'HunkListWidget', event) -> None:
		self._setHoveredRow(-1)
		super().leaveEvent(event)

	def _setHoveredRow(self: 'HunkListWidget', row: int) -> None:
		if row != self._hoveredRow:
			self._hoveredRow = row
			self.hunkHovered.emit(row)


# --- MainWindow integration ---

def render_diff_html(window: 'MainWindow', alignedHunks: Optional[List[AlignedHunk]] = None) -> None:
	"""
	Re-renders the side-by-side tab at the current font size and collapse state,
	keeping the scroll position.
	"""
	if alignedHunks is None:
		alignedHunks = alignAllHunks(window._diff)
	fontPt: int = window._fontScale.metrics.codePt
	try:
		scrollBar = window._diffBrowser.verticalScrollBar()
		position: int = scrollBar.value()
		window._diffBrowser.setHtml(renderAlignedHunksHtml(alignedHunks, fontPt, window._collapsedHunks))
		scrollBar.setValue(position)
	except RuntimeError as e:
		# Widget already deleted during shutdown
		logger.error(f"Failed to render diff view: {e}")


def display_diff(window: 'MainWindow', diff: Optional[DiffResult]) -> None:
	"""
	Renders the given diff into the diff tab and refreshes the hunk list.

	Args:
		window (MainWindow): The main application window instance.
		diff (Optional[DiffResult]): Diff to show, or None to clear the view.
	"""
	alignedHunks: List[AlignedHunk] = alignAllHunks(diff)
	render_diff_html(window, alignedHunks)

	window._hunkListWidget.blockSignals(True)
	try:
		window._hunkListWidget.clear()
		for aligned in alignedHunks:
			window._hunkListWidget.addItem(QListWidgetItem(_hunkLabel(aligned)))
	finally:
		window._hunkListWidget.blockSignals(False)
	window._hunkListWidget.resetHover()

	rowCount: int = sum(len(aligned.rows) for aligned in alignedHunks)
	logger.debug(f"Diff view rendered: {len(alignedHunks)} hunks, {rowCount} rows.")


def display_stats(window: 'MainWindow') -> None:
	""" Refreshes the toolbar statistics for the current diff and statistics mode. """
	if window._diff is None:
		window._statsLabel.setText("")
		window._statsLabel.setToolTip("Run a diff to see statistics.")
		return
	text, tooltip = formatStats(computeStats(window._diff, window._statsMode), window._statsMode)
	window._statsLabel.setText(text)
	window._statsLabel.setToolTip(tooltip)
