"""Animal record request and response models.

JSON keys match the ``animalweb`` column names used by the front end.
"""

from pydantic import BaseModel, ConfigDict, Field


class AnimalFields(BaseModel):
    """Writable fields of an animal record.

    ``animal_name`` is checked by the store rather than here, so a missing or
    empty name produces a 400 validation error instead of a 422.
    """

    model_config = ConfigDict(extra="ignore")

    animal_name: str | None = Field(default=None, examples=["Lion"])
    animal_char: str | None = Field(default=None, examples=["Large, muscular cat"])
    animal_desc: str | None = Field(default=None)
    animal_habitat: str | None = Field(default=None, examples=["Savanna"])
    animal_diet: str | None = Field(default=None, examples=["Carnivore"])
    animal_agg: str | int | float | None = Field(
        default=None,
        description="Aggression level, numeric or a label",
        examples=[8, "high"],
    )
    animal_cat: str | None = Field(default=None, examples=["Mammal"])
    animal_pic: str | None = Field(default=None, examples=["/images/lion.jpg"])


class AnimalRecord(BaseModel):
    """A stored animal record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    animal_name: str
    animal_char: str | None = None
    animal_desc: str | None = None
    animal_habitat: str | None = None
    animal_diet: str | None = None
    animal_agg: str | None = None
    animal_cat: str | None = None
    animal_pic: str | None = None


class AnimalCount(BaseModel):
    """Number of stored records."""

    count: int


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class AnimalCreated(MessageResponse):
    """Confirmation of a created record with its new ID."""

    id: int
