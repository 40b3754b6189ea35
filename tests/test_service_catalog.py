import pytest
from chillthrive.db import schemas
from chillthrive.services import service_catalog
from chillthrive.services.errors import NotFound


def test_services_are_listed_in_display_order(db_session):
    service_catalog.create_service(
        db_session, schemas.ServiceCreate(name="Steam Bath", price=800, display_order=2)
    )
    service_catalog.create_service(
        db_session, schemas.ServiceCreate(name="Ice Bath Therapy", price=1500, display_order=1)
    )
    service_catalog.create_service(
        db_session,
        schemas.ServiceCreate(name="Retired Combo", price=2000, is_combo=True, is_active=False),
    )

    assert [s.name for s in service_catalog.list_services(db_session, active_only=True)] == [
        "Ice Bath Therapy",
        "Steam Bath",
    ]
    assert len(service_catalog.list_services(db_session)) == 3


def test_partial_update_keeps_other_fields(db_session):
    service = service_catalog.create_service(
        db_session, schemas.ServiceCreate(name="Steam Bath", price=800, duration_minutes=45)
    )

    updated = service_catalog.update_service(db_session, service.id, schemas.ServiceUpdate(price=950))

    assert updated.price == 950
    assert updated.duration_minutes == 45
    with pytest.raises(NotFound):
        service_catalog.update_service(db_session, 404, schemas.ServiceUpdate(price=1))
