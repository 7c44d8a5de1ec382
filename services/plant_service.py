from sqlalchemy.orm import Session
from models.plant import Plant
from schemas.task import TaskKind
from services.exceptions import NotFound
from datetime import date
import uuid


def get_owned_plant(db: Session, user_id: uuid.UUID, plant_id: uuid.UUID) -> Plant:
    """
    Fetch a plant owned by the user. Plants of other users are reported as missing.
    """
    plant = db.query(Plant).filter(
        Plant.user_id == user_id,
        Plant.plant_id == plant_id
    ).first()

    if plant is None:
        raise NotFound("Plant not found")

    return plant


def record_care(plant: Plant, kind: str, on: date) -> bool:
    """
    Stamp last_watered / last_fertilized after a care task is completed.

    Only moves the stamp forward; returns True when the plant was changed.
    Pruning and other tasks leave the plant untouched.
    """
    if kind == TaskKind.WATERING.value:
        if plant.last_watered is None or plant.last_watered < on:
            plant.last_watered = on
            return True
    elif kind == TaskKind.FERTILIZING.value:
        if plant.last_fertilized is None or plant.last_fertilized < on:
            plant.last_fertilized = on
            return True
    return False
