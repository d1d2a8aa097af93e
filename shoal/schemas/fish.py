from pydantic import BaseModel, Field

# Ages and ids are unsigned 32-bit values
MAX_U32 = 2**32 - 1


class FishCreate(BaseModel):
    name: str = Field(..., max_length=255)
    species: str = Field(..., max_length=255)
    age: int = Field(..., ge=0, le=MAX_U32)
    weight_kg: float = Field(..., allow_inf_nan=False)


class FishUpdate(BaseModel):
    """Partial update: only non-null fields in the request body are applied."""

    name: str | None = Field(default=None, max_length=255)
    species: str | None = Field(default=None, max_length=255)
    age: int | None = Field(default=None, ge=0, le=MAX_U32)
    weight_kg: float | None = Field(default=None, allow_inf_nan=False)


class FishRead(BaseModel):
    id: int
    name: str
    species: str
    age: int
    weight_kg: float

    model_config = {"from_attributes": True}
