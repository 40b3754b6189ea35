from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from ...api import deps
from ...db.session import get_db
from ...db import schemas
from ...services.calendar_policy import CalendarPolicy
from ...services.errors import DuplicateBlockedDate, NotFound

router = APIRouter(prefix="/blocked-dates", tags=["blocked-dates"])


@router.get("", response_model=list[schemas.BlockedDate])
def list_blocked_dates(db: Session = Depends(get_db)):
    return CalendarPolicy(db).list_blocked_dates()


@router.post("", response_model=schemas.BlockedDate, status_code=status.HTTP_201_CREATED)
def block_date(
    payload: schemas.BlockedDateCreate,
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin")),
):
    try:
        return CalendarPolicy(db).block_date(payload.blocked_date, payload.reason)
    except DuplicateBlockedDate as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.delete("/{blocked_id}")
def unblock_date(
    blocked_id: int,
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin")),
):
    try:
        CalendarPolicy(db).unblock_date(blocked_id)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"status": "deleted"}
