# backend/hoteldb/security.py

"""
Identity helpers for the hotel backend.

Session handling lives in the front end; the API only needs to know who is
acting so that stock transactions and audit events can be attributed. The
caller passes that as an opaque user id in the `X-User-Id` header.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException, status

SYSTEM_USER_ID = "system"

# Matches the recorded_by / actor_user_id columns.
USER_ID_MAX_LENGTH = 64


def resolve_actor(user_id: Optional[str]) -> str:
    """Return the acting user id, or the system placeholder when unknown."""
    if user_id is None:
        return SYSTEM_USER_ID
    user_id = user_id.strip()
    return user_id or SYSTEM_USER_ID


def get_acting_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> str:
    actor = resolve_actor(x_user_id)
    if len(actor) > USER_ID_MAX_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"X-User-Id must be at most {USER_ID_MAX_LENGTH} characters.",
        )
    return actor
