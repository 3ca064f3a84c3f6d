# app/schemas/swap_request_schema.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Literal, Optional

from app.models.swap_request import SwapStatusEnum
from app.schemas.profile_schema import ProfileBrief

DEFAULT_SWAP_MESSAGE = "Would love to exchange skills with you!"


# --- Create ---
class SwapRequestCreate(BaseModel):
    recipient_id: str
    message: Optional[str] = Field(None, max_length=2000)
    requester_skill_id: Optional[str] = None
    recipient_skill_id: Optional[str] = None


# --- Status change ---
class SwapRequestStatusUpdate(BaseModel):
    status: Literal["accepted", "rejected", "completed"]


# --- Read ---
class SwapRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    requester_id: str
    recipient_id: str
    requester_skill_id: Optional[str] = None
    recipient_skill_id: Optional[str] = None
    message: Optional[str] = None
    status: SwapStatusEnum
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


# Incoming tab: who asked
class IncomingSwapRequestOut(SwapRequestOut):
    requester: Optional[ProfileBrief] = None


# Outgoing tab: who was asked
class OutgoingSwapRequestOut(SwapRequestOut):
    recipient: Optional[ProfileBrief] = None


# Admin list: both sides
class SwapRequestWithPartiesOut(SwapRequestOut):
    requester: Optional[ProfileBrief] = None
    recipient: Optional[ProfileBrief] = None


class CompletedSwapOut(SwapRequestOut):
    """
    Completed tab. partner and completed_at are computed per viewer,
    nothing here is stored.
    """
    partner: Optional[ProfileBrief] = None
    completed_at: Optional[datetime] = None
