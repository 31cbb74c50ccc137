# main.py
"""
Main application entry point.
Initialises logging, configuration, the GUI, and starts the Qt event loop.
"""
import logging
import sys

from PySide6.QtWidgets import QApplication, QMessageBox

from core.config_manager import ConfigManager
from core.exceptions import ConfigurationError
from gui.main_window import MainWindow
from utils.logger_setup import parseLogLevel, setupLogging

# --- Constants ---
CONFIG_FILE_PATH: str = 'config.ini'
ENV_FILE_PATH: str = '.env'


def configure_logging(config_manager: ConfigManager) -> logging.Logger:
	"""Configure logging based on loaded configuration settings."""
	file_log_level_name = config_manager.getConfigValue('Logging', 'FileLogLevel', fallback='DEBUG')
	log_dir = config_manager.getConfigValue('Logging', 'LogDirectory', fallback='logs')
	log_filename = config_manager.getConfigValue('Logging', 'LogFileName', fallback='diffsync.log')

	return setupLogging(
		logToConsole=True,
		logToFile=True,
		logFileLevel=parseLogLevel(file_log_level_name, logging.DEBUG),
		logDir=log_dir,
		logFileName=log_filename
	)


def _fatal(title: str, message: str) -> None:
	app = QApplication.instance() or QApplication(sys.argv)
	QMessageBox.critical(None, title, message)
	sys.exit(1)


def main() -> None:
	"""Main application entry point."""
	logger: logging.Logger = setupLogging(logToConsole=True, logToFile=True)
	logger.info("================ DiffSync Starting ================")

	configManager: ConfigManager = ConfigManager(CONFIG_FILE_PATH, ENV_FILE_PATH)
	try:
		configManager.loadEnv()
		configManager.loadConfig()
		logger = configure_logging(configManager)
		logger.info("Configuration loaded. Logger reconfigured with settings from config.")
		# Fail early on an invalid [Diff] section rather than on the first run
		configManager.getDiffOptions()
	except ConfigurationError as e:
		errorMessage = f"Fatal Configuration Error: {e}\nPlease check your '{ENV_FILE_PATH}' and '{CONFIG_FILE_PATH}' files.\nApplication cannot continue."
		logger.critical(errorMessage, exc_info=True)
		_fatal("Configuration Error", errorMessage)

	app: QApplication = QApplication.instance() or QApplication(sys.argv)
	app.setApplicationName("DiffSync")

	try:
		mainWindow: MainWindow = MainWindow(configManager)
		width: int = configManager.getConfigValueInt('GUI', 'WindowWidth', fallback=1200)
		height: int = configManager.getConfigValueInt('GUI', 'WindowHeight', fallback=800)
		mainWindow.resize(width, height)

		screen = app.primaryScreen().geometry()
		mainWindow.move((screen.width() - width) // 2, (screen.height() - height) // 2)
		mainWindow.show()
	except Exception as e:
		errorMessage = f"Failed to initialise the main application window: {e}"
		logger.critical(errorMessage, exc_info=True)
		_fatal("GUI Initialisation Error", errorMessage)

	logger.info("Main window displayed. Starting Qt event loop.")
	exitCode: int = app.exec()
	logger.info(f"Application finished with exit code: {exitCode}")
	sys.exit(exitCode)


if __name__ == "__main__":
	main()
