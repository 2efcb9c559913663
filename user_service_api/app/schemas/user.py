"""
Pydantic models for user data.

``UserCreate`` and ``UserUpdate`` are the typed input contracts for the
HTTP surface; ``UserRead`` is what every operation returns.  The
profile fields are deliberately small: a display name plus optional
contact details.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Alice"])
    email: Optional[str] = Field(None, max_length=255, examples=["alice@example.com"])
    phone: Optional[str] = Field(None, max_length=32, examples=["+1 555 0100"])


class UserCreate(UserBase):
    """Schema for creating a user."""


class UserUpdate(BaseModel):
    """Schema for partially updating a user.

    All fields are optional; only the fields the client actually sent
    are written (see ``model_dump(exclude_unset=True)``).  ``email`` and
    ``phone`` may be cleared with an explicit ``null``; ``name`` may not.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=32)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("name cannot be null")
        return v


class UserRead(BaseModel):
    """Schema for reading a user.

    Rows come from a table this service does not own, so only the
    column types are enforced here; length rules apply to input only.
    """

    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }
