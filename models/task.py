from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, Text, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from db.database import Base
import uuid
from datetime import datetime

class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_due_completed", "user_id", "due_date", "completed"),
        Index("ix_tasks_user_next_recurrence", "user_id", "next_recurrence"),
    )

    task_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.user_id"), nullable=False)
    plant_id = Column(Uuid, ForeignKey("plants.plant_id"), nullable=False)
    kind = Column(String, nullable=False)  # watering / fertilizing / pruning / other
    due_date = Column(Date, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    completed_date = Column(Date)
    notes = Column(Text)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurrence_pattern = Column(String)  # daily / weekly / monthly / yearly
    recurrence_interval = Column(Integer)
    next_recurrence = Column(Date)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    plant = relationship("Plant", back_populates="tasks")
