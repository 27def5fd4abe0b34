from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from skillmap.infrastructure.db.models import Level, Role


class _OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class DepartmentItem(_OrmModel):
    id: int
    name: str


class UserItem(_OrmModel):
    id: str
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    email: str
    level: Level
    role: Role
    need_congratulate: bool
    departments: list[DepartmentItem]
    last_datetime_pass: datetime | None = None


class SpecializationItem(_OrmModel):
    id: int
    name: str


class CompetenceItem(_OrmModel):
    id: int
    name: str
    specialization: SpecializationItem


class UserCompetenceItem(_OrmModel):
    id: int
    competence: CompetenceItem
    updated_at: datetime


class UserStatistic(UserItem):
    competencies: list[UserCompetenceItem]


class UserWithStatistic(UserStatistic):
    competencies_count: int


class DepartmentUsers(_OrmModel):
    name: str
    users: list[UserItem]


class UsersByDepartmentsResponse(BaseModel):
    departments: list[DepartmentUsers]


class UserUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=128)
    last_name: str | None = Field(None, min_length=1, max_length=128)
    avatar_url: str | None = None
    email: EmailStr | None = None
    level: Level | None = None
    blocked: bool | None = None
