"""Command-line interface for configninja."""
