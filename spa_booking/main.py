import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from .config import settings
from .database import engine, get_db
from .models.tables import Base
from .routers import clients, reservations, rooms, services, shifts, slots, therapists
from .services.scheduling import SchedulingError

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready")
    yield


app = FastAPI(title="Spa Booking API", lifespan=lifespan)

app.include_router(reservations.router)
app.include_router(slots.router)
app.include_router(shifts.router)
app.include_router(therapists.router)
app.include_router(rooms.router)
app.include_router(services.router)
app.include_router(clients.router)


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.get("/health")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"database": "ok"}
