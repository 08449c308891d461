from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Read-only view of an employee; CRUD lives outside this package."""

    employee_id: int
    full_name: str
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    is_active: bool = True
