# app/routers/swap_request_router.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.core.security import get_current_profile
from app.models.profile import Profile
from app.services.swap_request_service import SwapRequestService
from app.schemas.swap_request_schema import (
    SwapRequestCreate,
    SwapRequestStatusUpdate,
    SwapRequestOut,
    IncomingSwapRequestOut,
    OutgoingSwapRequestOut,
    CompletedSwapOut,
)

router = APIRouter(
    prefix="/swap-requests",
    tags=["Swap Requests"],
    dependencies=[Depends(get_current_profile)] # every route needs a synced, active profile
)

# -----------------------------------------------------------------
# 1. Send a request
# -----------------------------------------------------------------
@router.post("", response_model=SwapRequestOut, status_code=status.HTTP_201_CREATED)
async def create_swap_request(
    data: SwapRequestCreate,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile)
):
    """
    Ask another member for a skill swap. The request starts pending and
    expires after SWAP_REQUEST_TTL_DAYS.
    """
    service = SwapRequestService(db)
    return await service.create_swap_request(current_profile, data)

# -----------------------------------------------------------------
# 2. Lists
# -----------------------------------------------------------------
@router.get("/incoming", response_model=List[IncomingSwapRequestOut])
async def get_incoming_requests(
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile)
):
    service = SwapRequestService(db)
    return await service.get_incoming(current_profile)

@router.get("/outgoing", response_model=List[OutgoingSwapRequestOut])
async def get_outgoing_requests(
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile)
):
    service = SwapRequestService(db)
    return await service.get_outgoing(current_profile)

@router.get("/completed", response_model=List[CompletedSwapOut])
async def get_completed_swaps(
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile)
):
    """
    Completed swaps where the caller is either party, each with the
    other party as `partner`.
    """
    service = SwapRequestService(db)
    return await service.get_completed(current_profile)

# -----------------------------------------------------------------
# 3. Accept / reject / complete
# -----------------------------------------------------------------
@router.patch("/{request_id}/status", response_model=SwapRequestOut)
async def update_swap_request_status(
    request_id: str,
    update_data: SwapRequestStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile)
):
    """
    - accepted / rejected: recipient only, from pending
    - completed: either party, from accepted
    """
    service = SwapRequestService(db)
    return await service.update_status(request_id, update_data.status, current_profile)

# -----------------------------------------------------------------
# 4. Withdraw
# -----------------------------------------------------------------
@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def withdraw_swap_request(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile)
):
    """
    The requester withdraws a request that is still pending.
    """
    service = SwapRequestService(db)
    await service.delete_swap_request(request_id, current_profile)
    return
