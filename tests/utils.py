from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession
from skillmap.api.deps import issue_smoke_token
from skillmap.infrastructure.db.models import (
    Competence,
    Department,
    Level,
    Role,
    Specialization,
    UserCompetence,
    UserDepartment,
    UserModel,
)


def auth_headers(user_id: str) -> dict[str, str]:
    token = issue_smoke_token(user_id, email=f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


@dataclass
class SeededDirectory:
    users: dict[str, str] = field(default_factory=dict)
    departments: dict[str, int] = field(default_factory=dict)

    def headers(self, key: str) -> dict[str, str]:
        return auth_headers(self.users[key])


# key: (first name, last name, level, memberships, blocked, need_congratulate,
#       competence ages)
USERS: dict[str, tuple] = {
    "admin": ("Ada", "Admin", Level.LEAD, [("Backend", Role.ADMIN)], False, False, []),
    "tech_lead": ("Tom", "Lead", Level.SENIOR, [("Frontend", Role.TECH_LEAD)], False, False, []),
    "head": ("Hana", "Head", Level.SENIOR, [("QA", Role.HEAD_OF_DEPARTMENT)], False, False, []),
    "manager": ("Mia", "Manager", Level.MIDDLE, [("Backend", Role.MANAGER)], False, False, []),
    "bob": (
        "Bob",
        "Backend",
        Level.JUNIOR,
        [("Backend", Role.DEVELOPER)],
        False,
        True,
        [timedelta(days=2), timedelta(days=3)],
    ),
    "alice": (
        "Alice",
        "Anders",
        Level.MIDDLE,
        [("Backend", Role.DEVELOPER)],
        False,
        False,
        [timedelta(days=40)],
    ),
    "nina": ("Nina", "Nocomp", Level.JUNIOR, [("Backend", Role.DEVELOPER)], False, False, []),
    "fred": (
        "Fred",
        "Front",
        Level.TRAINEE,
        [("Frontend", Role.DEVELOPER)],
        False,
        False,
        [timedelta(hours=1)],
    ),
    "ben": (
        "Ben",
        "Blocked",
        Level.SENIOR,
        [("Backend", Role.DEVELOPER)],
        True,
        False,
        [timedelta(hours=2)],
    ),
    "lou": ("Lou", "Nodept", Level.TRAINEE, [], False, False, []),
}


async def seed_directory(session: AsyncSession) -> SeededDirectory:
    seeded = SeededDirectory()
    now = datetime.now(UTC)

    departments = {name: Department(name=name) for name in ("Backend", "Frontend", "QA")}
    session.add_all(departments.values())

    specialization = Specialization(name="Python")
    competence = Competence(name="Async IO", specialization=specialization)
    session.add_all([specialization, competence])
    await session.flush()

    for key, (first, last, level, memberships, blocked, congratulate, ages) in USERS.items():
        user = UserModel(
            first_name=first,
            last_name=last,
            email=f"{key}@example.com",
            level=level,
            blocked=blocked,
            need_congratulate=congratulate,
        )
        session.add(user)
        await session.flush()

        for department_name, role in memberships:
            session.add(
                UserDepartment(
                    user_id=user.id,
                    department_id=departments[department_name].id,
                    role=role,
                )
            )
        for age in ages:
            session.add(
                UserCompetence(
                    user_id=user.id,
                    competence_id=competence.id,
                    created_at=now - age,
                    updated_at=now - age,
                )
            )
        seeded.users[key] = user.id

    await session.commit()
    seeded.departments = {name: department.id for name, department in departments.items()}
    return seeded
