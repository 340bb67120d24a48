"""
Plan Models

Resolved, about-to-be-applied sets of server operations. A plan is a
discriminated union keyed by ``kind``; deploy plans carry a stack
disposition that is itself keyed by ``action``.
"""

from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Tuple, Union

from pctl.models.commands import FileMapping, InlineEnv


class PlanKind(Enum):
    """Discriminator for plan definitions."""

    DEPLOY = "deploy"
    DESTROY = "destroy"


class StackAction(Enum):
    """Discriminator for stack dispositions."""

    CREATE = "create"
    UPDATE = "update"


@dataclass(frozen=True)
class CreateStack:
    """The stack does not exist yet and is created inside the swarm."""

    name: str
    swarm_id: str
    action: StackAction = StackAction.CREATE

    def describe(self) -> str:
        return f"create stack '{self.name}' in swarm {self.swarm_id}"


@dataclass(frozen=True)
class UpdateStack:
    """The stack exists and is updated in place with pruning."""

    stack_id: int
    name: str
    action: StackAction = StackAction.UPDATE

    def describe(self) -> str:
        return f"update stack '{self.name}' (id {self.stack_id}) with prune"


StackDisposition = Union[CreateStack, UpdateStack]


@dataclass(frozen=True)
class ResourceRef:
    """A server-side entity resolved at build time."""

    id: Union[int, str]
    name: str


@dataclass(frozen=True)
class DeployPlan:
    """Create-or-update a stack plus the configs/secrets it references."""

    stack: StackDisposition
    compose: str
    inline_vars: Tuple[InlineEnv, ...] = ()
    configs: Tuple[FileMapping, ...] = ()
    secrets: Tuple[FileMapping, ...] = ()
    kind: PlanKind = PlanKind.DEPLOY

    @property
    def operation_count(self) -> int:
        return len(self.configs) + len(self.secrets) + 1


@dataclass(frozen=True)
class DestroyPlan:
    """Delete a snapshot of stacks, configs and secrets."""

    stacks: Tuple[ResourceRef, ...] = ()
    configs: Tuple[ResourceRef, ...] = ()
    secrets: Tuple[ResourceRef, ...] = ()
    unmatched: Tuple[str, ...] = ()
    kind: PlanKind = PlanKind.DESTROY

    @property
    def operation_count(self) -> int:
        return len(self.stacks) + len(self.configs) + len(self.secrets)

    @property
    def is_empty(self) -> bool:
        return self.operation_count == 0


PlanDefinition = Union[DeployPlan, DestroyPlan]


def merge_env(pairs: Iterable[InlineEnv]) -> Dict[str, str]:
    """
    Merge env pairs into one mapping.

    Later pairs win on duplicate keys; a key keeps the position of its first
    occurrence.

    Args:
        pairs: Ordered KEY=VALUE pairs

    Returns:
        Ordered mapping of merged variables
    """
    merged: Dict[str, str] = OrderedDict()
    for pair in pairs:
        merged[pair.key] = pair.value
    return merged
