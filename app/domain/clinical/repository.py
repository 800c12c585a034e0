from typing import List, Optional
import uuid

from app.domain.clinical.models import (
    PatientDetails,
    SurgeonDetails,
    VitalSigns,
    SurgicalHistory,
    SurgicalCase,
    CaseStatus,
)
from app.infrastructure.row_security import RowSecuredRepository


class PatientDetailsRepository(RowSecuredRepository):
    """Repository for patient details"""

    model = PatientDetails


class SurgeonDetailsRepository(RowSecuredRepository):
    """Repository for the surgeon directory"""

    model = SurgeonDetails

    async def list_by_specialty(self, specialty: str, skip: int = 0, limit: int = 100) -> List[SurgeonDetails]:
        return await self.list(skip=skip, limit=limit, specialty=specialty)


class VitalSignsRepository(RowSecuredRepository):
    """Repository for vital-sign measurements"""

    model = VitalSigns

    async def list_for_patient(
        self,
        patient_id: Optional[uuid.UUID] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[VitalSigns]:
        """Newest measurements first"""
        return await self.list(
            skip=skip,
            limit=limit,
            order_by=VitalSigns.created_at.desc(),
            patient_id=patient_id
        )


class SurgicalHistoryRepository(RowSecuredRepository):
    """Repository for past surgical procedures"""

    model = SurgicalHistory

    async def list_for_patient(
        self,
        patient_id: Optional[uuid.UUID] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[SurgicalHistory]:
        return await self.list(
            skip=skip,
            limit=limit,
            order_by=SurgicalHistory.surgery_date.desc(),
            patient_id=patient_id
        )


class SurgicalCaseRepository(RowSecuredRepository):
    """Repository for surgical cases"""

    model = SurgicalCase

    async def search(
        self,
        patient_id: Optional[uuid.UUID] = None,
        surgeon_id: Optional[uuid.UUID] = None,
        status: Optional[CaseStatus] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[SurgicalCase]:
        return await self.list(
            skip=skip,
            limit=limit,
            order_by=SurgicalCase.created_at,
            patient_id=patient_id,
            surgeon_id=surgeon_id,
            status=status
        )

    async def update_status(self, case_id: uuid.UUID, status: CaseStatus) -> SurgicalCase:
        """Move a case through its lifecycle"""
        return await self.update(case_id, {"status": status})
