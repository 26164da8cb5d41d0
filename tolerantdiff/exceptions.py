"""Custom exceptions for tolerantdiff."""


class TolerantDiffError(Exception):
    """Base exception for tolerantdiff errors."""
    pass


class ParseError(TolerantDiffError):
    """Raised when input is not valid JSON or not a JSON value."""
    def __init__(self, message: str, line: int = None, column: int = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


class IntrospectionError(TolerantDiffError):
    """Raised when the internals of a compared value cannot be inspected."""
    def __init__(self, message: str, path: str = "$"):
        super().__init__(f"{message} (at {path})")
        self.message = message
        self.path = path


class ConfigError(TolerantDiffError):
    """Raised when a configuration file or value is invalid."""
    def __init__(self, message: str, key: str = None):
        super().__init__(f"Invalid config key '{key}': {message}" if key else message)
        self.message = message
        self.key = key
