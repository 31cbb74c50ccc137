# core/config_manager.py
"""
Manages loading and accessing application configuration.

Settings live in an .ini file (config.ini) read with configparser; a .env file,
loaded with python-dotenv, can override selected settings through DIFFSYNC_*
environment variables. Changes made at runtime (font size, link-scroll default)
are kept in memory and written back with saveConfig().
"""

import configparser
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv

from .diff_models import Algorithm, DiffOptions
from .exceptions import ConfigurationError

logger: logging.Logger = logging.getLogger(__name__)

# (section, key) -> environment variable that overrides it
ENV_OVERRIDES: Dict[Tuple[str, str], str] = {
	('Logging', 'FileLogLevel'): 'DIFFSYNC_LOG_LEVEL',
	('History', 'HistoryFile'): 'DIFFSYNC_HISTORY_FILE',
}

_TRUE_VALUES: List[str] = ['true', 'yes', 'on', '1']
_FALSE_VALUES: List[str] = ['false', 'no', 'off', '0']


class ConfigManager:
	"""
	Handles loading and providing access to configuration parameters.
	Loads from .env and .ini files, and allows saving changes to the .ini file.
	"""
	_config: configparser.ConfigParser
	_envLoaded: bool
	_configLoaded: bool
	_configLoadError: Optional[Exception]

	def __init__(self: 'ConfigManager', configFilePath: Optional[str] = 'config.ini', envFilePath: Optional[str] = '.env') -> None:
		"""
		Initialises the ConfigManager.

		Args:
			configFilePath (Optional[str]): Path to the .ini configuration file.
			envFilePath (Optional[str]): Path to the .env file with DIFFSYNC_* overrides.
		"""
		self._config = configparser.ConfigParser(interpolation=None)
		self._envLoaded = False
		self._configLoaded = False
		self._configLoadError = None
		self._envFilePath: Optional[str] = envFilePath
		self._configFilePath: Optional[str] = configFilePath
		logger.debug(f"ConfigManager initialised with config file: '{configFilePath}', env file: '{envFilePath}'")

	def loadEnv(self: 'ConfigManager', override: bool = False) -> bool:
		"""
		Loads environment variables from the .env file. Existing variables win unless override is True.

		Returns:
			bool: True if the file was found and loaded, False otherwise.

		Raises:
			ConfigurationError: If the .env file exists but cannot be processed.
		"""
		if not self._envFilePath:
			logger.info("No .env file path specified. Skipping loading from .env file.")
			return False
		try:
			if not os.path.exists(self._envFilePath):
				logger.debug(f".env file not found at '{self._envFilePath}'. Skipping.")
				return False
			self._envLoaded = bool(load_dotenv(dotenv_path=self._envFilePath, override=override))
			if not self._envLoaded:
				logger.warning(f".env file '{self._envFilePath}' was found but no variables were loaded.")
			return self._envLoaded
		except Exception as e:
			logger.error(f"Failed to load .env file from '{self._envFilePath}': {e}", exc_info=True)
			raise ConfigurationError(f"Error processing .env file '{self._envFilePath}': {e}") from e

	def loadConfig(self: 'ConfigManager') -> None:
		"""
		Loads settings from the .ini file. A missing file is not an error; defaults apply.

		Raises:
			ConfigurationError: If the file exists but is unreadable or malformed.
		"""
		self._configLoaded = False
		self._configLoadError = None
		if not self._configFilePath:
			logger.info("No configuration file path specified. Using built-in defaults.")
			return
		if not os.path.exists(self._configFilePath):
			logger.warning(f"Configuration file not found: {self._configFilePath}. Using built-in defaults.")
			return
		try:
			parser = configparser.ConfigParser(interpolation=None, inline_comment_prefixes=('#', ';'))
			readFiles: List[str] = parser.read(self._configFilePath, encoding='utf-8')
			if not readFiles:
				raise ConfigurationError(f"Config file '{self._configFilePath}' could not be read.")
			self._config = parser
			self._configLoaded = True
			logger.info(f"Loaded configuration from {self._configFilePath}")
		except configparser.Error as e:
			self._configLoadError = e
			logger.error(f"Failed to parse configuration file '{self._configFilePath}': {e}", exc_info=True)
			raise ConfigurationError(f"Error parsing config file '{self._configFilePath}': {e}") from e
		except ConfigurationError as e:
			self._configLoadError = e
			logger.error(str(e))
			raise

	def getConfigValue(self: 'ConfigManager', section: str, key: str, fallback: Optional[Any] = None, required: bool = False) -> Optional[Any]:
		"""
		Retrieves a raw (string) setting. An environment override, if defined for the
		key and set, takes precedence over the .ini value.

		Args:
			section (str): Section name in the .ini file.
			key (str): Key name within the section.
			fallback (Optional[Any]): Returned when the value is absent and not required.
			required (bool): Raise instead of falling back when absent.

		Raises:
			ConfigurationError: If required and not found, or if the config file failed to load.
		"""
		if self._configLoadError is not None:
			raise ConfigurationError(f"Cannot retrieve '{section}/{key}'; configuration file '{self._configFilePath}' failed to load: {self._configLoadError}") from self._configLoadError

		envName: Optional[str] = ENV_OVERRIDES.get((section, key))
		if envName:
			envValue: Optional[str] = os.getenv(envName)
			if envValue is not None and envValue.strip():
				logger.debug(f"Config '{section}/{key}' overridden by environment variable {envName}.")
				return envValue.strip()

		if self._config.has_section(section) and self._config.has_option(section, key):
			return self._config.get(section, key, raw=True)

		if required:
			errMsg = f"Required configuration value '{key}' not found in section '{section}'."
			logger.error(errMsg)
			raise ConfigurationError(errMsg)
		return fallback

	def getConfigValueInt(self: 'ConfigManager', section: str, key: str, fallback: Optional[int] = None, required: bool = False) -> Optional[int]:
		valueStr = self.getConfigValue(section, key, fallback=None, required=required)
		if valueStr is None:
			return fallback
		try:
			return int(valueStr)
		except (ValueError, TypeError) as e:
			errMsg = f"Configuration value '{section}/{key}' ('{valueStr}') is not a valid integer."
			logger.error(errMsg)
			raise ConfigurationError(errMsg) from e

	def getConfigValueBool(self: 'ConfigManager', section: str, key: str, fallback: Optional[bool] = None, required: bool = False) -> Optional[bool]:
		valueStr = self.getConfigValue(section, key, fallback=None, required=required)
		if valueStr is None:
			return fallback
		valueLower: str = str(valueStr).strip().lower()
		if valueLower in _TRUE_VALUES:
			return True
		if valueLower in _FALSE_VALUES:
			return False
		errMsg = f"Configuration value '{section}/{key}' ('{valueStr}') is not a valid boolean (use 1/yes/true/on or 0/no/false/off)."
		logger.error(errMsg)
		raise ConfigurationError(errMsg)

	def getDiffOptions(self: 'ConfigManager', contextLines: Optional[int] = None) -> DiffOptions:
		"""
		Builds the diff engine options from the [Diff] section.

		Args:
			contextLines (Optional[int]): Overrides [Diff] ContextLines when given.

		Raises:
			ConfigurationError: If a [Diff] value is malformed or names an unknown algorithm.
		"""
		algorithmName: str = str(self.getConfigValue('Diff', 'Algorithm', fallback=Algorithm.SEQUENCE.value)).strip().lower()
		try:
			algorithm = Algorithm(algorithmName)
		except ValueError as e:
			errMsg = f"Unknown diff algorithm '{algorithmName}' in [Diff] Algorithm (expected one of: {', '.join(a.value for a in Algorithm)})."
			logger.error(errMsg)
			raise ConfigurationError(errMsg) from e
		context: int = contextLines if contextLines is not None else self.getConfigValueInt('Diff', 'ContextLines', fallback=3)
		return DiffOptions(
			algorithm=algorithm,
			ignore_case=self.getConfigValueBool('Diff', 'IgnoreCase', fallback=False),
			ignore_whitespace=self.getConfigValueBool('Diff', 'IgnoreWhitespace', fallback=False),
			context_lines=max(0, context),
		)

	def setConfigValue(self: 'ConfigManager', section: str, key: str, value: str) -> None:
		"""
		Sets a value **in memory** only; call saveConfig() to persist it.

		Raises:
			ConfigurationError: If the config file failed to load or the value cannot be set.
		"""
		if self._configLoadError is not None:
			errMsg = f"Cannot set configuration value: '{self._configFilePath}' failed to load initially: {self._configLoadError}"
			logger.error(errMsg)
			raise ConfigurationError(errMsg) from self._configLoadError
		try:
			if not self._config.has_section(section):
				self._config.add_section(section)
			self._config.set(section, key, str(value))
			logger.debug(f"Set in-memory config value: [{section}] {key} = {value}")
		except (configparser.Error, ValueError) as e:
			errMsg = f"Error updating configuration in memory: {e}"
			logger.error(errMsg, exc_info=True)
			raise ConfigurationError(errMsg) from e

	def saveConfig(self: 'ConfigManager') -> None:
		"""
		Writes the in-memory configuration back to the .ini file.

		Raises:
			ConfigurationError: If no file path is configured or the file cannot be written.
		"""
		if not self._configFilePath:
			errMsg = "Cannot save configuration: No configuration file path was specified during initialisation."
			logger.error(errMsg)
			raise ConfigurationError(errMsg)
		try:
			configDir: str = os.path.dirname(self._configFilePath)
			if configDir:
				os.makedirs(configDir, exist_ok=True)
			with open(self._configFilePath, 'w', encoding='utf-8') as configFile:
				self._config.write(configFile)
			self._configLoaded = True
			logger.debug(f"Saved configuration to {self._configFilePath}")
		except OSError as e:
			errMsg = f"Failed to write configuration file '{self._configFilePath}': {e}"
			logger.error(errMsg, exc_info=True)
			raise ConfigurationError(errMsg) from e

	@property
	def isEnvLoaded(self: 'ConfigManager') -> bool:
		return self._envLoaded

	@property
	def isConfigLoaded(self: 'ConfigManager') -> bool:
		return self._configLoaded
