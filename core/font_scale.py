# core/font_scale.py
"""
User-selectable font scale (S / M / L) for the UI and code panes.
The chosen size is persisted through the ConfigManager under [GUI] FontSize.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .config_manager import ConfigManager
from .exceptions import ConfigurationError

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FontMetrics:
	uiPt: int
	codePt: int
	codeLineHeight: float


SIZES: List[str] = ["S", "M", "L"]
DEFAULT_SIZE: str = "M"
SCALE: Dict[str, FontMetrics] = {
	"S": FontMetrics(uiPt=9, codePt=9, codeLineHeight=1.5),
	"M": FontMetrics(uiPt=10, codePt=10, codeLineHeight=1.55),
	"L": FontMetrics(uiPt=12, codePt=12, codeLineHeight=1.6),
}


class FontScale:
	"""
	Holds the current font size and persists changes.

	Use grow()/shrink()/reset() from keyboard shortcuts; each returns the new size.
	"""

	def __init__(self: 'FontScale', configManager: Optional[ConfigManager] = None) -> None:
		self._configManager: Optional[ConfigManager] = configManager
		self._size: str = DEFAULT_SIZE
		if configManager is not None:
			saved: Optional[str] = configManager.getConfigValue('GUI', 'FontSize', fallback=DEFAULT_SIZE)
			self._size = saved.strip().upper() if isinstance(saved, str) and saved.strip().upper() in SIZES else DEFAULT_SIZE

	@property
	def size(self: 'FontScale') -> str:
		return self._size

	@property
	def metrics(self: 'FontScale') -> FontMetrics:
		return SCALE[self._size]

	def setSize(self: 'FontScale', size: str) -> str:
		if size not in SIZES:
			raise ValueError(f"Unknown font size '{size}'. Expected one of {SIZES}.")
		self._size = size
		self._persist()
		return self._size

	def grow(self: 'FontScale') -> str:
		return self.setSize(SIZES[min(SIZES.index(self._size) + 1, len(SIZES) - 1)])

	def shrink(self: 'FontScale') -> str:
		return self.setSize(SIZES[max(SIZES.index(self._size) - 1, 0)])

	def reset(self: 'FontScale') -> str:
		return self.setSize(DEFAULT_SIZE)

	def _persist(self: 'FontScale') -> None:
		if self._configManager is None:
			return
		try:
			self._configManager.setConfigValue('GUI', 'FontSize', self._size)
			self._configManager.saveConfig()
		except ConfigurationError as e:
			# Size stays applied for this session even if it cannot be saved
			logger.warning(f"Could not persist font size '{self._size}': {e}")
