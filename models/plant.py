from sqlalchemy import Column, String, Integer, Date, DateTime, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from db.database import Base
import uuid
from datetime import datetime

class Plant(Base):
    __tablename__ = "plants"

    plant_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.user_id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    species = Column(String, nullable=False)
    date_acquired = Column(Date, nullable=False)
    location = Column(String, nullable=False)
    watering_frequency = Column(Integer, nullable=False)  # days
    fertilizing_frequency = Column(Integer, nullable=False)  # days
    last_watered = Column(Date)
    last_fertilized = Column(Date)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("User", back_populates="plants")
    # tasks are meaningless without their plant
    tasks = relationship("Task", back_populates="plant", cascade="all, delete-orphan")
