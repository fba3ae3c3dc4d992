"""Exchange Schemas: offer creation and pending-offer view."""

from pydantic import BaseModel, ConfigDict, EmailStr


class ExchangeCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    to_user_email: EmailStr


class ExchangeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    game_id: int
    to_user_id: int
    to_user_email: str
