from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from ...api import deps
from ...db.session import get_db
from ...db import schemas
from ...services.errors import DuplicateTimeSlot, NotFound
from ...services.slot_catalog import SlotCatalog

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("", response_model=list[schemas.TimeSlot])
def list_active_slots(db: Session = Depends(get_db)):
    return [slot for slot in SlotCatalog(db).list_slots() if slot.is_active]


@router.get("/all", response_model=list[schemas.TimeSlot])
def list_all_slots(
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin", "staff")),
):
    return SlotCatalog(db).list_slots()


@router.post("", response_model=schemas.TimeSlot, status_code=status.HTTP_201_CREATED)
def create_slot(
    payload: schemas.TimeSlotCreate,
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin")),
):
    try:
        return SlotCatalog(db).create_slot(payload)
    except DuplicateTimeSlot as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.patch("/{slot_id}", response_model=schemas.TimeSlot)
def update_slot(
    slot_id: int,
    payload: schemas.TimeSlotUpdate,
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin")),
):
    try:
        return SlotCatalog(db).update_slot(slot_id, payload)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except DuplicateTimeSlot as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.post("/{slot_id}/deactivate", response_model=schemas.TimeSlot)
def deactivate_slot(
    slot_id: int,
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin")),
):
    try:
        return SlotCatalog(db).deactivate_slot(slot_id)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/{slot_id}")
def delete_slot(
    slot_id: int,
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin")),
):
    try:
        SlotCatalog(db).delete_slot(slot_id)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"status": "deleted"}
