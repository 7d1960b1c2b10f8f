# Custom exceptions for pluginopts


class PluginOptsError(Exception):
    """Base exception for all application-specific errors."""
    pass


class ParserError(PluginOptsError):
    """Raised when a source file cannot be read or parsed by tree-sitter."""
    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        self.message = message
        super().__init__(f"Failed to parse {file_path}: {message}")


class ConfigError(PluginOptsError):
    """Raised for configuration-related problems."""
    pass


class SourceRootError(PluginOptsError):
    """Raised when a source checkout or its plugin directories are missing."""
    pass


class ResultValidationError(PluginOptsError):
    """Raised when the aggregated parse result does not match the schema."""

    def __init__(self, message: str, errors: list = None):
        self.errors = errors or []
        super().__init__(message)


class GenerationError(PluginOptsError):
    """Raised when generated modules cannot be written."""
    pass
