from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from db.database import get_db
from auth.deps import get_current_user
from models.user import User
from models.plant import Plant
from schemas.plant import PlantCreate, PlantUpdate, PlantResponse, PlantInfo
from services.plant_service import get_owned_plant
from services.plant_info import get_plant_info
from datetime import datetime
from uuid import UUID
from typing import List

router = APIRouter(
    prefix="/plants",
    tags=["Plants"],
)


@router.get("/", response_model=List[PlantResponse])
def get_plants(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return (
        db.query(Plant)
        .filter(Plant.user_id == user.user_id)
        .order_by(Plant.created_at)
        .all()
    )


# declared before /{plant_id} so "species" is not parsed as an id
@router.get("/species/{name}", response_model=PlantInfo)
def get_species_info(name: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """
    Care information for a species, cached for 7 days
    """
    return get_plant_info(db, name)


@router.get("/{plant_id}", response_model=PlantResponse)
def get_plant(plant_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return get_owned_plant(db, user.user_id, plant_id)


@router.post("/", response_model=PlantResponse, status_code=status.HTTP_201_CREATED)
def create_plant(plant: PlantCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    new_plant = Plant(
        user_id=user.user_id,
        **plant.model_dump(),
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow(),
    )
    db.add(new_plant)
    db.commit()
    db.refresh(new_plant)
    return new_plant


@router.patch("/{plant_id}", response_model=PlantResponse)
def update_plant(
    plant_id: UUID,
    plant_update: PlantUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    plant = get_owned_plant(db, user.user_id, plant_id)

    for field, value in plant_update.model_dump(exclude_unset=True).items():
        # required columns cannot be cleared
        if value is None and field not in ("last_watered", "last_fertilized", "notes"):
            continue
        setattr(plant, field, value)

    plant.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(plant)
    return plant


@router.delete("/{plant_id}")
def delete_plant(plant_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    plant = get_owned_plant(db, user.user_id, plant_id)
    db.delete(plant)
    db.commit()
    return {"message": "Plant deleted successfully"}
