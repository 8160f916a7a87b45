"""Animal catalog endpoints.

Paths keep the names the existing front end calls. Reads are public;
``POST /addanimal`` requires a bearer token, and update/delete require one
only when ``protect_all_writes`` is enabled.
"""

from fastapi import APIRouter, status
from loguru import logger

from src.api.dependencies import AuthContext, WriteAccess
from src.api.schemas.animals import (
    AnimalCount,
    AnimalCreated,
    AnimalFields,
    AnimalRecord,
    MessageResponse,
)
from src.core.exceptions import NotFoundError
from src.infrastructure.database.dependencies import AnimalStoreDep

router = APIRouter(tags=["animals"])


def _not_found(animal_id: int) -> NotFoundError:
    return NotFoundError(
        f"No animal found with id {animal_id}", context={"animal_id": animal_id}
    )


@router.get("/allanimals", response_model=list[AnimalRecord])
async def list_animals(store: AnimalStoreDep) -> list[AnimalRecord]:
    """List every animal ordered by ID."""
    rows = await store.list_all()
    return [AnimalRecord.model_validate(row) for row in rows]


@router.get("/animals/category/{category}", response_model=list[AnimalRecord])
async def list_animals_by_category(
    category: str, store: AnimalStoreDep
) -> list[AnimalRecord]:
    """List animals in one category; an unknown category gives an empty list."""
    rows = await store.list_by_category(category)
    return [AnimalRecord.model_validate(row) for row in rows]


@router.get("/api/animals/count", response_model=AnimalCount)
async def count_animals(store: AnimalStoreDep) -> AnimalCount:
    """Number of stored animals."""
    return AnimalCount(count=await store.count())


@router.post(
    "/addanimal",
    response_model=AnimalCreated,
    status_code=status.HTTP_201_CREATED,
)
async def add_animal(
    auth: AuthContext,
    fields: AnimalFields,
    store: AnimalStoreDep,
) -> AnimalCreated:
    """Create an animal.

    Raises:
        AuthError: Missing, malformed, invalid or expired bearer token (401).
        ValidationError: ``animal_name`` missing or blank (400).
        StoreError: The insert failed (500).
    """
    new_id = await store.create(fields.model_dump())
    logger.info(
        "Animal {} created by user {}", new_id, auth.user_id, animal_id=new_id
    )
    return AnimalCreated(
        message=f"Animal {fields.animal_name} added successfully.", id=new_id
    )


@router.put("/updateanimal/{animal_id}", response_model=MessageResponse)
async def update_animal(
    animal_id: int,
    _auth: WriteAccess,
    fields: AnimalFields,
    store: AnimalStoreDep,
) -> MessageResponse:
    """Replace every field of an animal.

    Raises:
        ValidationError: ``animal_name`` missing or blank (400).
        NotFoundError: No animal has this ID (404).
        StoreError: The update failed (500).
    """
    if not await store.update(animal_id, fields.model_dump()):
        raise _not_found(animal_id)
    logger.info("Animal {} updated", animal_id, animal_id=animal_id)
    return MessageResponse(message=f"Animal with id {animal_id} updated successfully.")


@router.delete("/deleteanimal/{animal_id}", response_model=MessageResponse)
async def delete_animal(
    animal_id: int,
    _auth: WriteAccess,
    store: AnimalStoreDep,
) -> MessageResponse:
    """Delete an animal.

    Raises:
        NotFoundError: No animal has this ID (404).
        StoreError: The delete failed (500).
    """
    if not await store.delete(animal_id):
        raise _not_found(animal_id)
    logger.info("Animal {} deleted", animal_id, animal_id=animal_id)
    return MessageResponse(message=f"Animal with id {animal_id} deleted successfully.")
