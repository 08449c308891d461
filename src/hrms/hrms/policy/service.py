from __future__ import annotations

import logging
from typing import Any, Optional

from ..common.datetime_utils import now_local
from .model import PolicyConfig
from .repository import PolicyRepository

logger = logging.getLogger(__name__)


class PolicyService:
    """Use case: read and administer the active attendance policy."""

    def __init__(self, policies: PolicyRepository):
        self._policies = policies

    def get_active(self) -> PolicyConfig:
        """Return the stored policy, persisting the defaults on first access."""
        policy = self._policies.get_active()
        if policy is None:
            logger.info("No attendance policy stored, creating defaults")
            policy = self._policies.save(PolicyConfig().validate())
        return policy

    def update(self, changes: dict[str, Any], *, updated_by: Optional[int] = None) -> PolicyConfig:
        """Merge ``changes`` over the active policy; invalid windows are rejected before saving."""
        current = self.get_active()
        candidate = current.merged(changes).validate()
        saved = self._policies.save(candidate.touched(updated_by=updated_by, at=now_local()))
        logger.info(
            "Attendance policy updated by %s: check-in %s-%s, check-out %s-%s, grace %s, hours %s",
            updated_by,
            saved.check_in_start,
            saved.check_in_end,
            saved.check_out_start,
            saved.check_out_end,
            saved.grace_period,
            saved.work_hours,
        )
        return saved
