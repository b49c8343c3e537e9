from __future__ import annotations


class SubtitleError(Exception):
    """
    Base class for errors raised by PySubfix, optionally wrapping an underlying exception
    """
    def __init__(self, message : str|None = None, error : Exception|None = None):
        super().__init__(message)
        self.message : str|None = message
        self.error : Exception|None = error

    def __str__(self) -> str:
        if self.error:
            return f"{self.message} ({str(self.error)})" if self.message else str(self.error)
        return self.message or super().__str__()


class UnsupportedLineEndingError(SubtitleError, ValueError):
    """
    Raised when a line ending other than CR, LF or CRLF is requested for output
    """
    def __init__(self, line_ending : str|None):
        super().__init__(f"Unsupported line ending: {line_ending!r}")
        self.line_ending = line_ending
