"""Routers of the HTTP API, mounted under ``Settings.api_prefix``."""
