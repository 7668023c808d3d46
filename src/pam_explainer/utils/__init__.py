"""Utilities: file helpers, results I/O, config paths, logging setup."""
