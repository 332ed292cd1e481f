"""Core building blocks: error codes, limits, exceptions, and the schema builder."""
