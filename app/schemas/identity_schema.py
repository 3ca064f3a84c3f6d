# app/schemas/identity_schema.py
from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional


class IdentityUser(BaseModel):
    """
    The signed-in account as the identity provider describes it.
    Built from verified session-token claims, optionally completed
    by a backend API lookup.
    """
    id: str
    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    image_url: Optional[str] = None
    role: Optional[str] = None

    @field_validator('email', mode='before')
    @classmethod
    def blank_email_is_none(cls, v):
        # Providers send "" for accounts without an address
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def merged_with(self, other: "IdentityUser") -> "IdentityUser":
        """Fill fields missing here with the values from other"""
        return IdentityUser(
            id=self.id,
            email=self.email or other.email,
            full_name=self.full_name or other.full_name,
            image_url=self.image_url or other.image_url,
            role=self.role or other.role,
        )
