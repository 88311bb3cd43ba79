"""Command-line interface for the client portal."""
