"""Customer domain entity."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.core.entities.product import new_id


class Customer(BaseModel):
    """A registered buyer and their running spend."""

    id: str = Field(default_factory=new_id)
    name: str
    phone: str = ""
    email: str | None = None
    total_spent: float = 0.0
    last_purchase_date: datetime | None = None
    preferences: list[str] = Field(default_factory=list)  # "type size" tokens
