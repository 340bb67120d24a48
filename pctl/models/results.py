"""
Result Models

Dataclass models for plan execution outcomes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from pctl.models.plan import PlanKind


class ResultStatus(Enum):
    """Status of a plan execution."""

    APPLIED = "applied"
    DECLINED = "declined"
    NOTHING_TO_DO = "nothing-to-do"


@dataclass
class ExecutionReport:
    """Outcome of executing a plan."""

    kind: PlanKind
    status: ResultStatus
    applied: List[str] = field(default_factory=list)

    @property
    def is_applied(self) -> bool:
        """Check if the plan's operations were sent to the server."""
        return self.status == ResultStatus.APPLIED

    @property
    def is_declined(self) -> bool:
        """Check if the operator answered 'no' at the confirmation prompt."""
        return self.status == ResultStatus.DECLINED

    def __repr__(self) -> str:
        return (
            f"ExecutionReport(kind={self.kind.value}, status={self.status.value}, "
            f"applied={len(self.applied)})"
        )
