"""Application services orchestrating repositories, storage and carriers.

Services raise :class:`~src.core.exceptions.PrimePrintError` subclasses and
never deal with HTTP; the API layer maps those errors to status codes.
"""
