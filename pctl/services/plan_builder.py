"""
Plan Building Service

Inspects live server state for one endpoint and computes what a deploy or
destroy needs to do. Nothing is changed on the server here.
"""

from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from pctl.api import DOCKER_CONFIGS, DOCKER_SECRETS, PortainerApi
from pctl.logger import CommandLogger
from pctl.models.commands import FileMapping, InlineEnv
from pctl.models.plan import (
    CreateStack,
    DeployPlan,
    DestroyPlan,
    ResourceRef,
    StackDisposition,
    UpdateStack,
)
from pctl.models.records import DockerObject, StackRecord
from pctl.services.plan_executor import Plan

if TYPE_CHECKING:
    from pctl.services.endpoint_resolver import Endpoint


def _unique(names: Iterable[str]) -> List[str]:
    seen = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return seen


class PlanBuilder:
    """
    Plan building service.

    Deploy:
    - Resolve the endpoint's swarm
    - Create the stack if no stack of that name exists, otherwise update it

    Destroy:
    - Snapshot requested stacks, configs and secrets that exist right now
    """

    def __init__(self, logger: Optional[CommandLogger] = None):
        self.logger = logger

    def deploy(
        self,
        endpoint: "Endpoint",
        stack: str,
        compose: str,
        inline_vars: Iterable[InlineEnv] = (),
        configs: Iterable[FileMapping] = (),
        secrets: Iterable[FileMapping] = (),
    ) -> Plan:
        """
        Build a deploy plan.

        Config/secret files are not read here; that happens at execute time.

        Args:
            endpoint: Resolved endpoint (consumed on success)
            stack: Stack name
            compose: Compose file content
            inline_vars: Ordered env overrides
            configs: Config name -> file mappings to create
            secrets: Secret name -> file mappings to create

        Returns:
            Executable plan

        Raises:
            TransportError: If a lookup request fails
            DecodeError: If a lookup response is malformed
        """
        swarm_id = endpoint.swarm_id
        existing = [
            s
            for s in endpoint.api.list_stacks(endpoint_id=endpoint.id, swarm_id=swarm_id)
            if s.belongs_to(endpoint.id)
        ]

        definition = DeployPlan(
            stack=self.stack_disposition(stack, swarm_id, existing),
            compose=compose,
            inline_vars=tuple(inline_vars),
            configs=tuple(configs),
            secrets=tuple(secrets),
        )

        if self.logger:
            self.logger.log(f"Deploy plan: {definition.stack.describe()}")

        return Plan(definition, endpoint.id, endpoint.release_transport(), self.logger)

    def stack_disposition(
        self, name: str, swarm_id: str, existing: Sequence[StackRecord]
    ) -> StackDisposition:
        """
        Decide between creating and updating a stack.

        The first stack with an exactly matching name wins.
        """
        matches = [s for s in existing if s.name == name]
        if not matches:
            return CreateStack(name=name, swarm_id=swarm_id)

        if len(matches) > 1 and self.logger:
            ids = ", ".join(str(s.id) for s in matches)
            self.logger.warning(
                f"{len(matches)} stacks named '{name}' (ids {ids}); updating id {matches[0].id}"
            )
        return UpdateStack(stack_id=matches[0].id, name=name)

    def destroy(
        self,
        endpoint: "Endpoint",
        stacks: Iterable[str] = (),
        configs: Iterable[str] = (),
        secrets: Iterable[str] = (),
    ) -> Plan:
        """
        Build a destroy plan.

        Requested names that do not exist on the server are skipped without
        error; they are recorded on the plan and logged.

        Args:
            endpoint: Resolved endpoint (consumed on success)
            stacks: Stack names to delete
            configs: Config names to delete
            secrets: Secret names to delete

        Returns:
            Executable plan

        Raises:
            TransportError: If a lookup request fails
            DecodeError: If a lookup response is malformed
        """
        api = endpoint.api
        stacks, configs, secrets = _unique(stacks), _unique(configs), _unique(secrets)

        stack_refs: Tuple[ResourceRef, ...] = ()
        if stacks:
            on_endpoint = api.list_stacks(endpoint_id=endpoint.id)
            # Servers that ignore the filter return stacks of other endpoints too
            stack_refs = tuple(
                ResourceRef(s.id, s.name)
                for s in on_endpoint
                if s.name in stacks and s.belongs_to(endpoint.id)
            )

        config_refs = self._docker_refs(api, endpoint.id, DOCKER_CONFIGS, configs)
        secret_refs = self._docker_refs(api, endpoint.id, DOCKER_SECRETS, secrets)

        unmatched = (
            self._unmatched("stack", stacks, stack_refs)
            + self._unmatched("config", configs, config_refs)
            + self._unmatched("secret", secrets, secret_refs)
        )

        definition = DestroyPlan(
            stacks=stack_refs,
            configs=config_refs,
            secrets=secret_refs,
            unmatched=unmatched,
        )

        if self.logger:
            self.logger.log(
                f"Destroy plan: {len(stack_refs)} stack(s), {len(config_refs)} config(s), "
                f"{len(secret_refs)} secret(s)"
            )
            for entry in unmatched:
                self.logger.warning(f"Not found on endpoint {endpoint.id}: {entry}")

        return Plan(definition, endpoint.id, endpoint.release_transport(), self.logger)

    @staticmethod
    def _docker_refs(
        api: PortainerApi, endpoint_id: int, kind: str, names: List[str]
    ) -> Tuple[ResourceRef, ...]:
        if not names:
            return ()
        # The server-side name filter also matches partial names
        found: List[DockerObject] = api.list_docker_objects(endpoint_id, kind, names)
        return tuple(ResourceRef(o.id, o.name) for o in found if o.name in names)

    @staticmethod
    def _unmatched(
        label: str, requested: List[str], refs: Tuple[ResourceRef, ...]
    ) -> Tuple[str, ...]:
        found = {ref.name for ref in refs}
        return tuple(f"{label} '{name}'" for name in requested if name not in found)
