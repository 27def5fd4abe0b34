from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from skillmap.domain.reference_data import DEPARTMENT_NAMES, SPECIALIZATION_COMPETENCIES

from .models import Competence, Department, Specialization

logger = structlog.get_logger()


async def seed_reference_data(session: AsyncSession) -> None:
    """Insert missing departments, specializations and their competencies."""
    existing_departments = set((await session.scalars(select(Department.name))).all())
    for name in DEPARTMENT_NAMES:
        if name not in existing_departments:
            session.add(Department(name=name))

    existing_specializations = set((await session.scalars(select(Specialization.name))).all())
    for spec_name, competence_names in SPECIALIZATION_COMPETENCIES.items():
        if spec_name in existing_specializations:
            continue
        specialization = Specialization(name=spec_name)
        session.add(specialization)
        await session.flush()
        for competence_name in competence_names:
            session.add(Competence(name=competence_name, specialization_id=specialization.id))

    await session.commit()
    logger.info(
        "reference_data_seeded",
        departments=len(DEPARTMENT_NAMES),
        specializations=len(SPECIALIZATION_COMPETENCIES),
    )
