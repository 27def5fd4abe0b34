from skillmap.domain.models import DepartmentGroup, StatisticQuery, UserQuery

__all__ = ["DepartmentGroup", "StatisticQuery", "UserQuery"]
