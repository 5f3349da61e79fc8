"""Command-line interface for archlink."""
