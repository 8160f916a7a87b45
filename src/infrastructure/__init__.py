"""Infrastructure layer: data persistence for the animal catalog.

- **database.session**: Async engine, bounded connection pool and sessions
- **database.models**: ORM mapping of the ``animalweb`` table
- **database.repository**: Generic statement-level CRUD helpers
- **database.animal_store**: Catalog operations with not-found semantics
- **database.dependencies**: FastAPI dependency wiring
"""
