"""Adapters to everything outside the process.

- **database**: async PostgreSQL access with SQLAlchemy, models and repositories
- **storage**: blob storage for uploaded media and exported PDFs
- **carriers**: HTTP clients for parcel tracking providers
"""
