"""HTTP layer of the animal catalog service.

- **main**: application factory and lifespan
- **routes**: liveness, login and animal catalog endpoints
- **dependencies**: bearer-token and service dependencies
- **middleware**: origin gate, correlation IDs, access logging, error handlers
- **schemas**: request and response models
"""
