from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional
from uuid import UUID


class PlantBase(BaseModel):
    name: str
    species: str
    date_acquired: date
    location: str
    watering_frequency: int = Field(ge=1)  # days
    fertilizing_frequency: int = Field(ge=1)  # days
    last_watered: Optional[date] = None
    last_fertilized: Optional[date] = None
    notes: Optional[str] = None


class PlantCreate(PlantBase):
    pass


class PlantUpdate(BaseModel):
    name: Optional[str] = None
    species: Optional[str] = None
    date_acquired: Optional[date] = None
    location: Optional[str] = None
    watering_frequency: Optional[int] = Field(default=None, ge=1)
    fertilizing_frequency: Optional[int] = Field(default=None, ge=1)
    last_watered: Optional[date] = None
    last_fertilized: Optional[date] = None
    notes: Optional[str] = None


class PlantResponse(PlantBase):
    plant_id: UUID
    user_id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PlantSummary(BaseModel):
    """Plant fields embedded in task responses"""
    plant_id: UUID
    name: str
    species: str

    class Config:
        from_attributes = True


class PlantCare(BaseModel):
    light: str
    water: str
    soil: str
    temperature: str
    humidity: str
    fertilizer: str
    propagation: str


class PlantInfo(BaseModel):
    summary: str
    image_url: Optional[str] = None
    scientific_name: Optional[str] = None
    family: Optional[str] = None
    care: PlantCare
