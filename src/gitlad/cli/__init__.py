"""Command-line interface for gitlad."""
