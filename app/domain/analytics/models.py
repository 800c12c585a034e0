from sqlalchemy import Column, String, Integer, DateTime, CheckConstraint, Index, Uuid
from sqlalchemy.sql import func
from app.infrastructure.database import Base
import uuid
import enum


class Season(str, enum.Enum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"


class HistoricalSurgicalData(Base):
    """Weekly surgical volume per hospital, consumed by external forecasting"""
    __tablename__ = "historical_surgical_data"
    __table_args__ = (
        CheckConstraint(
            "season IN ('spring', 'summer', 'fall', 'winter')",
            name="ck_historical_surgical_data_season"
        ),
        Index("idx_historical_data_hospital_year", "hospital_id", "year"),
    )
    __enum_columns__ = {"season": Season}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    hospital_id = Column(String(50), nullable=False)
    week_number = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    surgical_volume = Column(Integer, nullable=False)
    specialty = Column(String(200))
    season = Column(String(10))

    created_at = Column(DateTime(timezone=True), server_default=func.now())


def _week(week_number: int, volume: int, specialty: str, season: str) -> dict:
    return {
        "hospital_id": "HOSP001",
        "week_number": week_number,
        "year": 2023,
        "surgical_volume": volume,
        "specialty": specialty,
        "season": season,
    }


# Sample rows loaded by the initial migration and SEED_HISTORICAL_DATA
HISTORICAL_VOLUME_SEED = [
    _week(1, 42, "General Surgery", "winter"),
    _week(2, 45, "General Surgery", "winter"),
    _week(3, 38, "General Surgery", "winter"),
    _week(4, 51, "General Surgery", "winter"),
    _week(5, 47, "General Surgery", "winter"),
    _week(6, 49, "General Surgery", "winter"),
    _week(7, 52, "General Surgery", "winter"),
    _week(8, 48, "General Surgery", "winter"),
    _week(9, 44, "General Surgery", "spring"),
    _week(10, 46, "General Surgery", "spring"),
    _week(11, 50, "General Surgery", "spring"),
    _week(12, 53, "General Surgery", "spring"),
    _week(13, 55, "Orthopedic", "spring"),
    _week(14, 41, "Orthopedic", "spring"),
    _week(15, 43, "Orthopedic", "spring"),
    _week(16, 47, "Orthopedic", "spring"),
    _week(17, 49, "Orthopedic", "spring"),
    _week(18, 52, "Orthopedic", "spring"),
    _week(19, 48, "Orthopedic", "summer"),
    _week(20, 45, "Orthopedic", "summer"),
]
