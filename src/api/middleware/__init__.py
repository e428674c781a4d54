"""Middleware applied to every request.

Registration order in ``create_app`` means they run, outermost first:
security headers, request context (correlation ID), request logging. CORS
wraps them all. Exceptions are turned into responses by the handlers in
:mod:`src.api.middleware.error_handler`.
"""
