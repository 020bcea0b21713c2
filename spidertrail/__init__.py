"""Endpoint discovery for web crawlers: parsers that turn fetched pages into navigation requests."""

__version__ = "1.1.2"