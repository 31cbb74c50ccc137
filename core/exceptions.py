# core/exceptions.py
"""
Defines custom exception classes for specific error conditions within the application.
The alignment and mapping engine itself never raises (it clamps); these are used by
the collaborators around it: configuration, the diff engine boundary and history persistence.
"""


class BaseApplicationError(Exception):
	"""
	Base class for all custom application-specific exceptions.
	Provides a common ancestor for catching application-related errors.
	"""
	def __init__(self: 'BaseApplicationError', message: str = "An application error occurred.") -> None:
		"""
		Initialises the BaseApplicationError.

		Args:
			message (str): A descriptive message for the error.
		"""
		super().__init__(message)


class ConfigurationError(BaseApplicationError):
	"""
	Raised for errors encountered during loading, parsing, or accessing
	configuration settings (e.g., missing keys, invalid formats).
	"""
	def __init__(self: 'ConfigurationError', message: str = "Configuration error.") -> None:
		super().__init__(message)


class DiffEngineError(BaseApplicationError):
	"""
	Raised when the line-diff engine cannot produce a result, e.g. an input
	file could not be read or an unknown algorithm was requested.
	"""
	def __init__(self: 'DiffEngineError', message: str = "Diff engine error.") -> None:
		super().__init__(message)


class HunkContractError(BaseApplicationError):
	"""
	Raised when a hunk violates the line-count contract: the lines that are not
	insertions must number a_lines, and the lines that are not deletions must number b_lines.
	"""
	def __init__(self: 'HunkContractError', message: str = "Hunk violates the line-count contract.") -> None:
		super().__init__(message)


class FileProcessingError(BaseApplicationError):
	"""
	Raised for errors related to file system operations, such as reading or
	writing the recent-comparisons history file.
	"""
	def __init__(self: 'FileProcessingError', message: str = "File processing error.") -> None:
		"""
		Initialises the FileProcessingError.

		Args:
			message (str): A descriptive message specific to the file system operation issue.
		"""
		super().__init__(message)
