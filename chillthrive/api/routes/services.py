from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from ...api import deps
from ...db.session import get_db
from ...db import schemas
from ...services import service_catalog
from ...services.errors import NotFound

router = APIRouter(prefix="/services", tags=["services"])


@router.get("", response_model=list[schemas.Service])
def list_services(db: Session = Depends(get_db)):
    return service_catalog.list_services(db, active_only=True)


@router.get("/all", response_model=list[schemas.Service])
def list_all_services(
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin", "staff")),
):
    return service_catalog.list_services(db)


@router.post("", response_model=schemas.Service, status_code=status.HTTP_201_CREATED)
def create_service(
    payload: schemas.ServiceCreate,
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin")),
):
    return service_catalog.create_service(db, payload)


@router.patch("/{service_id}", response_model=schemas.Service)
def update_service(
    service_id: int,
    payload: schemas.ServiceUpdate,
    db: Session = Depends(get_db),
    _: deps.Principal = Depends(deps.require_roles("admin")),
):
    try:
        return service_catalog.update_service(db, service_id, payload)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
