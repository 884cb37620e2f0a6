class SearchError(Exception):
    """Base class for errors raised by the search engine."""

    code = "SEARCH_ERROR"


class PatternCompileError(SearchError, ValueError):
    """Raised when a regex pattern (or its flags) cannot be compiled."""

    code = "ERR_PATTERN"

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid regular expression /{pattern}/: {reason}")
        self.pattern = pattern
        self.reason = reason


class StreamProcessingError(SearchError):
    """Wraps an I/O failure that happened while streaming a large file."""

    code = "ERR_STREAM"

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"Stream processing error: {cause}")
        self.path = path
        self.cause = cause


class DirectoryNotFoundError(SearchError, FileNotFoundError):
    code = "ERR_DIRECTORY_NOT_FOUND"


class NotRegularFileError(SearchError, OSError):
    """Raised for FIFOs, sockets and devices, which cannot be read to EOF safely."""

    code = "ERR_NOT_REGULAR_FILE"
