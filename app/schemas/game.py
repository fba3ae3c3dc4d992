"""Game Schemas: Pydantic models with field-level validation for game payloads.

Invariants:
    - name/publisher: 2-50 chars; year: positive and not in the future
    - condition: one of GameCondition, accepted in any case, stored lower-case
    - platforms: list of 1-30 char tags, lower-cased; required on create
    - previous_owners: non-negative, defaults to 0

Design Decisions:
    - GameCreate and GamePatch share one validating base so partial updates obey
      the same rules as full ones
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.domain_types import GameCondition
from app.core.repository_protocols import GameLike


class _GameFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    @field_validator("condition", mode="before", check_fields=False)
    @classmethod
    def lower_condition(cls, v):
        return v.lower() if isinstance(v, str) else v

    @field_validator("platforms", check_fields=False)
    @classmethod
    def normalize_platforms(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        platforms = [p.strip().lower() for p in v]
        if any(not 1 <= len(p) <= 30 for p in platforms):
            raise ValueError("platform names must be 1-30 characters")
        return platforms

    @field_validator("year", check_fields=False)
    @classmethod
    def not_in_future(cls, v: int | None) -> int | None:
        if v is not None and v > datetime.now(timezone.utc).year:
            raise ValueError("year cannot be in the future")
        return v


class GameCreate(_GameFields):
    name: str = Field(min_length=2, max_length=50)
    publisher: str = Field(min_length=2, max_length=50)
    year: int = Field(gt=0)
    platforms: list[str]
    condition: GameCondition
    previous_owners: int = Field(0, ge=0)


class GamePatch(_GameFields):
    name: str | None = Field(None, min_length=2, max_length=50)
    publisher: str | None = Field(None, min_length=2, max_length=50)
    year: int | None = Field(None, gt=0)
    platforms: list[str] | None = None
    condition: GameCondition | None = None
    previous_owners: int | None = Field(None, ge=0)


class GameResponse(BaseModel):
    id: int
    name: str
    publisher: str
    year: int
    condition: str
    previous_owners: int
    owned_by: int
    platforms: list[str]

    @classmethod
    def from_model(cls, game: GameLike) -> "GameResponse":
        return cls(
            id=game.id,
            name=game.name,
            publisher=game.publisher,
            year=game.year,
            condition=game.condition,
            previous_owners=game.previous_owners,
            owned_by=game.owned_by,
            platforms=game.platform_names,
        )
