"""Pydantic request/response models.

- **animals**: Animal record fields and mutation results
- **auth**: Login request and token response
- **errors**: Uniform error body
"""
