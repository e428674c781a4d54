"""HTTP clients for parcel tracking providers."""

from src.infrastructure.carriers.client import CarrierClient, CarrierLookup

__all__ = ["CarrierClient", "CarrierLookup"]
