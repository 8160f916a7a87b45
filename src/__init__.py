"""Animal API: a small catalog service for the animal encyclopedia front end.

- **api**: FastAPI application, routes and middleware
- **auth**: credential checks, bearer tokens and origin allowlisting
- **core**: configuration, logging, tracing and the error hierarchy
- **infrastructure**: SQLAlchemy models, sessions and the animal store
"""
