"""Shared utilities: configuration, logging and HTTP client setup."""
