"""
Exceptions raised by the console core.

Components raise these; OperatorConsole turns a ValidationError into a
single error-severity log entry and leaves its state untouched.
"""


class ConsoleError(Exception):
    """Base class for console errors."""


class ValidationError(ConsoleError):
    """A user action was rejected because its input or the current state is invalid."""


class SourceValidationError(ValidationError):
    """A media source could not be selected, cleared or started."""


class ConsoleClosedError(ConsoleError):
    """An action reached a console that has already been torn down."""
