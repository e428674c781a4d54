"""Infrastructure constants."""

POOL_RECYCLE_SECONDS = 3600
COMMAND_TIMEOUT_SECONDS = 60

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Storage
MAX_STORED_NAME_LENGTH = 255
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Carrier requests
CARRIER_USER_AGENT = "Mozilla/5.0 (compatible; PrimePrintTracker/1.0)"
