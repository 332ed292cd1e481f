"""finval: validation and error formatting for personal-finance data."""

__version__ = "0.1.0"
