"""Command line interface for cashpilot."""
