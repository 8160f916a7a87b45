"""API utilities.

- **responses**: ``ORJSONResponse``, the default response class of the app
"""
