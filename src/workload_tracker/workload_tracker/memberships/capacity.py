from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

import structlog

from ..core.constants import FULL_CAPACITY
from ..core.exceptions import ValidationError

logger = structlog.get_logger(__name__)


class WorkloadCapPolicy(ABC):
    """Strategy Pattern: what happens when a user's summed workload would pass 100%.

    Only the single-assignment range (0, 100] is a hard rule everywhere; the aggregate cap
    is a deployment decision (see ENFORCE_WORKLOAD_CAP).
    """

    @abstractmethod
    def check(self, *, user_id: int, projected_total: Decimal) -> bool:
        """Return True when the projected total is over capacity (and allowed)."""
        raise NotImplementedError

    @staticmethod
    def over_capacity(projected_total: Decimal) -> bool:
        return projected_total > FULL_CAPACITY


class AdvisoryCapPolicy(WorkloadCapPolicy):
    """Never rejects; over-capacity is only logged and reported."""

    def check(self, *, user_id: int, projected_total: Decimal) -> bool:
        if not self.over_capacity(projected_total):
            return False
        logger.warning("workload_over_capacity", user_id=user_id, total_workload=str(projected_total))
        return True


class EnforcedCapPolicy(WorkloadCapPolicy):
    """Rejects any change that pushes the summed active workload above 100%."""

    def check(self, *, user_id: int, projected_total: Decimal) -> bool:
        if self.over_capacity(projected_total):
            raise ValidationError(
                f"Total active workload would reach {projected_total}%, above the 100% capacity",
                code="capacity",
            )
        return False


def cap_policy_for(enforce: bool) -> WorkloadCapPolicy:
    return EnforcedCapPolicy() if enforce else AdvisoryCapPolicy()
