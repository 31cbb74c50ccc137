# gui/gui_utils.py
"""
Utility functions and classes specific to the GUI components.
Includes the custom logging handler for directing logs to the GUI and
helpers for applying the font scale to widgets.
"""

import logging
import sys
from typing import Callable, Iterable, Optional

from PySide6.QtCore import QObject
from PySide6.QtWidgets import QWidget

from core.font_scale import FontMetrics
from .ui_setup import makeCodeFont


class QtLogHandler(logging.Handler, QObject):
	"""
	A logging handler that forwards formatted records to a Qt signal emitter.
	Inherits from logging.Handler and QObject.
	"""
	_signal_emitter: Optional[Callable[[str], None]] = None

	def __init__(self: 'QtLogHandler', signal_emitter: Optional[Callable[[str], None]] = None, parent: Optional[QObject] = None) -> None:
		"""
		Args:
			signal_emitter (Optional[Callable[[str], None]]): Callable (e.g. signal.emit) receiving each formatted message.
			parent (QObject, optional): Parent QObject. Defaults to None.
		"""
		logging.Handler.__init__(self)
		QObject.__init__(self, parent)
		self._signal_emitter = signal_emitter

	def emit(self: 'QtLogHandler', record: logging.LogRecord) -> None:
		if not self._signal_emitter:
			print(f"QtLogHandler Error: No signal emitter configured. Log Record: {record}", file=sys.stderr)
			return
		try:
			self._signal_emitter(self.format(record))
		except Exception:
			self.handleError(record)


def apply_code_font(widgets: Iterable[QWidget], metrics: FontMetrics) -> None:
	""" Sets the monospace code font at the current scale on each widget. """
	font = makeCodeFont(metrics.codePt)
	for widget in widgets:
		widget.setFont(font)
