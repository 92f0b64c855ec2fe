"""Command line interface for SQL Quest."""
