from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from ...api import deps
from ...core.clock import Clock
from ...db.session import get_db
from ...db import models, schemas
from ...services import booking_service, lifecycle
from ...services.calendar_policy import CalendarPolicy
from ...services.errors import (
    InvalidTransition,
    NotFound,
    SlotFull,
    Transient,
    Unbookable,
)

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _transition_response(result: lifecycle.TransitionResult) -> dict:
    notification = None
    if result.obligation is not None:
        notification = {
            "kind": result.obligation.kind.value,
            "feedback_reference": result.obligation.feedback_reference,
        }
    return {"booking": result.booking, "notification": notification}


@router.post("", response_model=schemas.Booking, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: schemas.BookingCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
):
    try:
        customer = booking_service.Customer(
            name=payload.customer_name,
            email=payload.customer_email,
            phone=payload.customer_phone,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    coordinator = booking_service.ReservationCoordinator(
        db, policy=CalendarPolicy(db, clock=clock), clock=clock
    )
    try:
        return coordinator.reserve(
            payload.booking_date,
            payload.time_slot,
            payload.service_id,
            customer,
            notes=payload.notes,
        )
    except Unbookable as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except SlotFull as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except Transient as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc


@router.get("", response_model=list[schemas.Booking])
def list_bookings(
    status_filter: models.BookingStatus | None = Query(default=None, alias="status"),
    booking_date: date | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin", "staff")),
):
    query = db.query(models.Booking)
    if status_filter:
        query = query.filter(models.Booking.status == status_filter)
    if booking_date:
        query = query.filter(models.Booking.booking_date == booking_date)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                models.Booking.customer_name.ilike(pattern),
                models.Booking.customer_email.ilike(pattern),
                models.Booking.customer_phone.ilike(pattern),
            )
        )
    return query.order_by(models.Booking.booking_date.desc(), models.Booking.id.desc()).all()


@router.get("/stats", response_model=schemas.BookingStats)
def booking_stats(
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
    _: deps.Principal = Depends(deps.require_roles("admin", "staff")),
):
    by_status = dict(
        db.query(models.Booking.status, func.count(models.Booking.id))
        .group_by(models.Booking.status)
        .all()
    )
    bookings_today = (
        db.query(models.Booking)
        .filter(models.Booking.booking_date == clock.today())
        .filter(models.Booking.status != models.BookingStatus.cancelled)
        .count()
    )
    revenue = (
        db.query(func.coalesce(func.sum(models.Booking.payment_amount), 0))
        .filter(models.Booking.payment_status == "completed")
        .scalar()
    )
    return {
        "total": sum(by_status.values()),
        "pending": by_status.get(models.BookingStatus.pending, 0),
        "confirmed": by_status.get(models.BookingStatus.confirmed, 0),
        "completed": by_status.get(models.BookingStatus.completed, 0),
        "cancelled": by_status.get(models.BookingStatus.cancelled, 0),
        "bookings_today": bookings_today,
        "revenue": int(revenue or 0),
    }


@router.get("/{booking_id}", response_model=schemas.Booking)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin", "staff")),
):
    booking = db.get(models.Booking, booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


@router.post("/{booking_id}/transition", response_model=schemas.TransitionResult)
def transition_booking(
    booking_id: int,
    payload: schemas.BookingTransition,
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
    admin: deps.Principal = Depends(deps.require_roles("admin", "staff")),
):
    try:
        result = lifecycle.transition_booking(
            db,
            booking_id,
            payload.status,
            feedback_reference=payload.feedback_reference,
            actor=admin.subject,
            clock=clock,
        )
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidTransition as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _transition_response(result)


@router.post("/{booking_id}/cancel", response_model=schemas.TransitionResult)
def cancel_booking(
    booking_id: int,
    payload: schemas.BookingCancel,
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
):
    try:
        result = lifecycle.cancel_by_customer(
            db, booking_id, payload.customer_email, clock=clock
        )
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidTransition as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _transition_response(result)


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin")),
):
    try:
        booking_service.delete_booking(db, booking_id)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"status": "deleted"}
