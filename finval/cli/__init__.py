"""CLI interface for finval.

This package provides command-line access to the validation engine:
validating JSON or CSV files of entity records, checking date strings,
listing supported entities, and checking settings files.
"""
