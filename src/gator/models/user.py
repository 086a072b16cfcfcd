"""User data model."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class User(BaseModel):
    """A registered user. Names are unique and case-sensitive."""

    id: UUID
    name: str = Field(..., min_length=1)
    created_at: datetime
    updated_at: datetime
