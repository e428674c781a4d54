"""HTTP layer of the back-office, built on FastAPI.

- **main**: application factory and lifespan
- **dependencies**: authentication and service providers
- **routers**: auth, documents, video testimonials, media and PDFs,
  trackings and public lookups
- **middleware**: security headers, correlation IDs, request logging and
  exception handlers
- **schemas**: request and response bodies
"""
