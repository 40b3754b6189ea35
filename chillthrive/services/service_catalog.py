from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import models, schemas
from .errors import NotFound


def list_services(db: Session, active_only: bool = False) -> list[models.Service]:
    stmt = select(models.Service).order_by(models.Service.display_order, models.Service.id)
    if active_only:
        stmt = stmt.where(models.Service.is_active.is_(True))
    return list(db.execute(stmt).scalars().all())


def create_service(db: Session, payload: schemas.ServiceCreate) -> models.Service:
    service = models.Service(**payload.model_dump())
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


def update_service(db: Session, service_id: int, payload: schemas.ServiceUpdate) -> models.Service:
    # price edits leave existing bookings' payment_amount alone
    service = db.get(models.Service, service_id)
    if service is None:
        raise NotFound("Service not found")
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(service, key, value)
    db.commit()
    db.refresh(service)
    return service
