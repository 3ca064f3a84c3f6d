# app/utils/swap_lifecycle.py
from typing import Dict, Optional, Set

# status -> statuses reachable from it
ALLOWED_TRANSITIONS: Dict[str, Set[str]] = {
    "pending": {"accepted", "rejected"},
    "accepted": {"completed"},
    "rejected": set(),
    "completed": set(),
}

# Which party may move a request into a status
TRANSITION_ACTORS: Dict[str, Set[str]] = {
    "accepted": {"recipient"},
    "rejected": {"recipient"},
    "completed": {"requester", "recipient"},
}


def _value(status) -> str:
    # Accepts plain strings or SwapStatusEnum members
    return getattr(status, "value", status)


def can_transition(current, new) -> bool:
    return _value(new) in ALLOWED_TRANSITIONS.get(_value(current), set())


def can_delete(current) -> bool:
    """Only pending requests may be withdrawn"""
    return _value(current) == "pending"


def party_role(swap, profile_id: str) -> Optional[str]:
    """'requester', 'recipient' or None for a non-party"""
    if swap.requester_id == profile_id:
        return "requester"
    if swap.recipient_id == profile_id:
        return "recipient"
    return None


def may_perform(swap, profile_id: str, new_status) -> bool:
    role = party_role(swap, profile_id)
    return role is not None and role in TRANSITION_ACTORS.get(_value(new_status), set())


def partner_of(swap, profile_id: str):
    """The other party of a swap as seen by profile_id"""
    if swap.requester_id == profile_id:
        return swap.recipient
    return swap.requester
