# utils/logger_setup.py
"""
Centralised logging configuration: a console handler on stderr and a rotating
log file, both attached to the root logger.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Union

DEFAULT_LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'
DEFAULT_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'
DEFAULT_LOG_FILE: str = 'diffsync.log'


def parseLogLevel(level: Union[str, int, None], default: int = logging.INFO) -> int:
	""" Converts a level name such as 'debug' (or an int) to a logging level, falling back to `default`. """
	if isinstance(level, int):
		return level
	if not level:
		return default
	value = getattr(logging, str(level).strip().upper(), None)
	return value if isinstance(value, int) else default


def setupLogging(
	logLevel: int = logging.DEBUG,
	logToConsole: bool = True,
	logToFile: bool = True,
	logFileName: str = DEFAULT_LOG_FILE,
	logFileLevel: int = logging.DEBUG,
	logDir: str = 'logs',
	maxBytes: int = 5 * 1024 * 1024,
	backupCount: int = 3,
	logFormat: str = DEFAULT_LOG_FORMAT,
	dateFormat: str = DEFAULT_DATE_FORMAT
) -> logging.Logger:
	"""
	Configures the root logger for the application.

	Existing root handlers are removed first, so calling this again (e.g. once the
	configuration file has been read) replaces the earlier setup instead of duplicating output.

	Args:
		logLevel (int): Minimum level for the root logger.
		logToConsole (bool): Attach a stderr handler.
		logToFile (bool): Attach a rotating file handler.
		logFileName (str): Log file name inside logDir.
		logFileLevel (int): Minimum level for the file handler.
		logDir (str): Directory for the log file; created if missing.
		maxBytes (int): Size at which the log file rotates.
		backupCount (int): Rotated files to keep.
		logFormat (str): Record format string.
		dateFormat (str): Timestamp format string.

	Returns:
		logging.Logger: The configured root logger.
	"""
	handlers: List[logging.Handler] = []
	formatter: logging.Formatter = logging.Formatter(logFormat, datefmt=dateFormat)

	if logToConsole:
		consoleHandler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
		consoleHandler.setFormatter(formatter)
		handlers.append(consoleHandler)

	logFilePath: str = os.path.join(logDir, logFileName)
	if logToFile:
		try:
			os.makedirs(os.path.abspath(logDir), exist_ok=True)
			fileHandler: RotatingFileHandler = RotatingFileHandler(
				logFilePath,
				maxBytes=maxBytes,
				backupCount=backupCount,
				encoding='utf-8'
			)
			fileHandler.setFormatter(formatter)
			fileHandler.setLevel(logFileLevel)
			handlers.append(fileHandler)
		except OSError as e:
			# Continue with console logging only
			print(f"ERROR: Failed to configure file logging to '{logFilePath}': {e}", file=sys.stderr)

	rootLogger: logging.Logger = logging.getLogger()
	rootLogger.setLevel(logLevel)
	for handler in rootLogger.handlers[:]:
		rootLogger.removeHandler(handler)
		handler.close()
	for handler in handlers:
		rootLogger.addHandler(handler)

	if handlers:
		rootLogger.info(f"Logging initialised (Root Level: {logging.getLevelName(rootLogger.level)}). Console: {logToConsole}, File: {logToFile} ('{logFilePath}').")
	else:
		print("WARNING: Logging initialisation completed but no handlers were configured.", file=sys.stderr)

	return rootLogger
