"""Exit code constants for CLI commands.

Exit codes:
    0: SUCCESS - Every record passed validation
    1: UNEXPECTED_ERROR - Unexpected/unhandled exception
    2: VALIDATION_ERROR - At least one record or value failed validation
    3: INPUT_ERROR - Input file missing, unreadable, or malformed
    4: CONFIG_ERROR - Settings file or argument error
"""


class ExitCode:
    """Standard exit codes for CLI commands.

    Example:
        >>> from finval.cli.exit_codes import ExitCode
        >>> ExitCode.VALIDATION_ERROR
        2
    """

    SUCCESS = 0
    """Operation completed successfully."""

    UNEXPECTED_ERROR = 1
    """Unexpected or unhandled exception occurred."""

    VALIDATION_ERROR = 2
    """Input data failed validation."""

    INPUT_ERROR = 3
    """Input file reading or parsing failed."""

    CONFIG_ERROR = 4
    """Settings file or argument error."""
