"""Type aliases for dynamic data structures throughout the application.

All types defined here should be JSON-serializable to support logging,
API responses, and persistence layers.
"""

from typing import Any

# JSON-compatible type that represents any valid JSON value
type JsonValue = (
    dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None
)

# Context dictionary for error details and debugging information
type ErrorContext = dict[str, Any]

# Raw provider payloads (carrier APIs) before normalisation
type ProviderPayload = dict[str, Any]
