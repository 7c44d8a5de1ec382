from sqlalchemy import Column, String, DateTime, JSON
from db.database import Base
from datetime import datetime

class PlantInfoCache(Base):
    __tablename__ = "plant_info_cache"

    search_term = Column(String, primary_key=True)  # trimmed, lower-cased species
    info = Column(JSON, nullable=False)
    last_updated = Column(DateTime, default=datetime.utcnow, nullable=False)
