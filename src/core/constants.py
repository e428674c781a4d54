"""Core application constants."""

# Security and redaction
REDACTED = "[REDACTED]"

# HSTS
DEFAULT_HSTS_MAX_AGE = 31536000  # 1 year in seconds
