from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api.routes import availability, blocked_dates, bookings, services, slots
from .config import get_settings
from .core.logging import RequestLoggingMiddleware, configure_logging
from .db.session import Base, engine
from .workers.scheduler import get_scheduler

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title="Chill & Thrive Booking API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(availability.router, prefix="/api/v1")
app.include_router(bookings.router, prefix="/api/v1")
app.include_router(slots.router, prefix="/api/v1")
app.include_router(blocked_dates.router, prefix="/api/v1")
app.include_router(services.router, prefix="/api/v1")

scheduler = get_scheduler()


@app.on_event("startup")
async def startup_event() -> None:
    Base.metadata.create_all(bind=engine)
    scheduler.start()


@app.on_event("shutdown")
async def shutdown_event() -> None:
    scheduler.shutdown(wait=False)
