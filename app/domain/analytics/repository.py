from typing import List, Optional
import logging

from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.analytics.models import HistoricalSurgicalData, HISTORICAL_VOLUME_SEED
from app.infrastructure.row_security import RowSecuredRepository

logger = logging.getLogger(__name__)


class HistoricalSurgicalDataRepository(RowSecuredRepository):
    """Repository for weekly surgical volume samples"""

    model = HistoricalSurgicalData

    async def search(
        self,
        hospital_id: Optional[str] = None,
        year: Optional[int] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[HistoricalSurgicalData]:
        return await self.list(
            skip=skip,
            limit=limit,
            order_by=HistoricalSurgicalData.week_number,
            hospital_id=hospital_id,
            year=year
        )


async def seed_historical_data(db: AsyncSession) -> int:
    """Load the sample volume rows once; returns the number inserted"""
    result = await db.execute(select(func.count()).select_from(HistoricalSurgicalData))
    if result.scalar_one() > 0:
        return 0

    await db.execute(insert(HistoricalSurgicalData), HISTORICAL_VOLUME_SEED)
    await db.commit()
    logger.info(f"Seeded {len(HISTORICAL_VOLUME_SEED)} historical surgical data rows")
    return len(HISTORICAL_VOLUME_SEED)
