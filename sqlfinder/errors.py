"""Exceptions raised while discovering, reading and analyzing source files."""


class SqlFinderError(Exception):
	"""Base class for sqlfinder errors."""


class DiscoveryError(SqlFinderError):
	"""Raised when the root directory of a batch cannot be resolved.

	This is the only failure that aborts a whole batch.
	"""


class FileReadError(SqlFinderError):
	"""Raised when a single source file cannot be read as text."""

	def __init__(self, path: str, reason: str):
		super().__init__(f"{path}: {reason}")
		self.path = path
		self.reason = reason


class ParseError(SqlFinderError):
	"""Raised by the syntax adapter when a file does not parse cleanly."""


class AnalysisError(SqlFinderError):
	"""Raised when either detection path fails unexpectedly on a file."""

	def __init__(self, path: str, reason: str):
		super().__init__(f"{path}: {reason}")
		self.path = path
		self.reason = reason
