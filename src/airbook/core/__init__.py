"""Core records, constants and errors for airbook."""
