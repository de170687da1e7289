"""Shared FastAPI dependencies and helpers for API routes."""

from __future__ import annotations

from datetime import date

from fastapi import HTTPException

from netgrowth.db.session import get_db  # re-export

__all__ = ["get_db", "parse_date_or_422"]


def parse_date_or_422(value: str | None, param_name: str) -> date | None:
    """Parse an ISO date query parameter; raise HTTPException 422 if malformed.

    Empty/None values pass (caller handles omission).
    """
    if not value or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise HTTPException(
            status_code=422,
            detail=f"Invalid {param_name}: must be an ISO date (YYYY-MM-DD)",
        ) from None
