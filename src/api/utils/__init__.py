"""Helpers of the HTTP layer."""
