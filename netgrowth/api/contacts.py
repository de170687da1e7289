"""Contact status, interaction and priority routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from netgrowth.api.deps import get_db
from netgrowth.models import Contact
from netgrowth.schemas.contact import (
    InteractionCreate,
    InteractionRead,
    PriorityRead,
    StatusUpdateRequest,
    TransitionRead,
    TransitionResponse,
)
from netgrowth.services.interactions import list_interactions, log_interaction
from netgrowth.services.priority_scoring import calculate_contact_priority
from netgrowth.services.status_transitions import (
    check_demotion,
    check_status_transition,
    manual_status_transition,
)

router = APIRouter()


def _require_contact(db: Session, contact_id: int) -> Contact:
    contact = (
        db.query(Contact)
        .filter(Contact.id == contact_id, Contact.deleted_at.is_(None))
        .first()
    )
    if contact is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


def _transition_response(result) -> TransitionResponse:
    return TransitionResponse(
        transition=TransitionRead.model_validate(result) if result is not None else None
    )


@router.put("/{contact_id}/status", response_model=TransitionResponse)
def api_set_status(
    contact_id: int,
    data: StatusUpdateRequest,
    db: Session = Depends(get_db),
) -> TransitionResponse:
    """Manually set a contact's status. transition is null when unchanged."""
    _require_contact(db, contact_id)
    result = manual_status_transition(db, contact_id, data.status.value, reason=data.reason)
    return _transition_response(result)


@router.post("/{contact_id}/status/check", response_model=TransitionResponse)
def api_check_status(contact_id: int, db: Session = Depends(get_db)) -> TransitionResponse:
    """Evaluate promotion, then demotion, for one contact."""
    _require_contact(db, contact_id)
    result = check_status_transition(db, contact_id)
    if result is None:
        result = check_demotion(db, contact_id)
    return _transition_response(result)


@router.post("/{contact_id}/interactions", response_model=InteractionRead, status_code=201)
def api_log_interaction(
    contact_id: int,
    data: InteractionCreate,
    db: Session = Depends(get_db),
) -> InteractionRead:
    try:
        interaction = log_interaction(
            db,
            contact_id,
            data.type.value,
            occurred_at=data.occurred_at,
            source=data.source.value,
            metadata=data.metadata,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None
    if interaction is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    return InteractionRead.model_validate(interaction)


@router.get("/{contact_id}/interactions", response_model=list[InteractionRead])
def api_list_interactions(contact_id: int, db: Session = Depends(get_db)) -> list[InteractionRead]:
    _require_contact(db, contact_id)
    return [InteractionRead.model_validate(i) for i in list_interactions(db, contact_id)]


@router.get("/{contact_id}/priority", response_model=PriorityRead)
def api_get_priority(contact_id: int, db: Session = Depends(get_db)) -> PriorityRead:
    """Priority breakdown; 404 when the contact is missing or already connected."""
    _require_contact(db, contact_id)
    result = calculate_contact_priority(db, contact_id)
    if result is None:
        raise HTTPException(
            status_code=404, detail="Priority applies to target or requested contacts only"
        )
    return PriorityRead.model_validate(result)
