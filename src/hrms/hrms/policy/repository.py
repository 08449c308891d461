from __future__ import annotations

from typing import Optional, Protocol

from .model import PolicyConfig


class PolicyRepository(Protocol):
    """Storage for the single active policy row.

    Writes are last-writer-wins on that row; the engine itself never locks.
    """

    def get_active(self) -> Optional[PolicyConfig]:
        raise NotImplementedError

    def save(self, policy: PolicyConfig) -> PolicyConfig:
        raise NotImplementedError
