"""Prime Print back-office API.

Layers:
- **api**: FastAPI routers, schemas, dependencies and middleware
- **core**: configuration, errors, logging, tracing and token handling
- **domain**: document masks and validators, roles, order and tracking rules
- **infrastructure**: database models and repositories, blob storage and
  carrier HTTP clients
- **services**: the use cases the routers call
"""
