import logging
import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
import time

from db.database import engine, Base

# import models so create_all sees every table
from models.user import User
from models.plant import Plant
from models.task import Task
from models.plant_info_cache import PlantInfoCache

from routers import auth, plants, tasks
from services.exceptions import InvalidRecurrenceConfig, NotFound, TransientPersistenceFailure
from logging_setup import setup_logging

logger = logging.getLogger(__name__)

app = FastAPI(title="Plant Care Tracker")

STARTED_AT = time.time()

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- routers ---
app.include_router(auth.router)
app.include_router(plants.router)
app.include_router(tasks.router)


# --- service errors -> HTTP ---
@app.exception_handler(NotFound)
def _not_found(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidRecurrenceConfig)
def _invalid_recurrence(request: Request, exc: InvalidRecurrenceConfig):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(TransientPersistenceFailure)
def _persistence_failure(request: Request, exc: TransientPersistenceFailure):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.on_event("startup")
def _startup():
    """
    Runs once when the server starts
    - logging
    - DB tables
    """
    setup_logging()
    Base.metadata.create_all(bind=engine)
    logger.info("Plant care tracker started")


# --- liveness probe, touches neither DB nor external APIs ---
@app.get("/ping", include_in_schema=False)
def ping():
    return {
        "ok": True,
        "service": "plant-care-tracker",
        "ts": datetime.now(timezone.utc).isoformat(),
        "uptime_sec": round(time.time() - STARTED_AT, 2),
    }
