from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from ...api import deps
from ...core.clock import Clock
from ...db.session import get_db
from ...db import schemas
from ...services.availability_service import AvailabilityCalculator
from ...services.calendar_policy import CalendarPolicy

router = APIRouter(tags=["availability"])


@router.get("/calendar/{day}/bookable", response_model=schemas.DateBookable)
def date_bookable(
    day: date,
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
):
    policy = CalendarPolicy(db, clock=clock)
    return {"date": day, "is_bookable": policy.is_bookable(day)}


@router.get("/availability", response_model=schemas.Availability)
def availability(
    day: date = Query(alias="date"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
):
    calculator = AvailabilityCalculator(db, policy=CalendarPolicy(db, clock=clock))
    return {"date": day, "slots": calculator.availability(day)}


@router.get("/availability/{day}/overview", response_model=schemas.DayOverview)
def day_overview(
    day: date,
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
    _: deps.Principal = Depends(deps.require_roles("admin", "staff")),
):
    calculator = AvailabilityCalculator(db, policy=CalendarPolicy(db, clock=clock))
    return calculator.day_overview(day)
