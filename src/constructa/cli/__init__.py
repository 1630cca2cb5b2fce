"""Command-line interface for constructa."""
