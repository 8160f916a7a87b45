"""HTTP routes for the animal catalog API."""

from src.api.routes import animals, auth, health

__all__ = ["animals", "auth", "health"]
