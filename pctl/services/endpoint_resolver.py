"""
Endpoint Resolution Service

Turns a human-friendly selector into exactly one endpoint id. Anything other
than exactly one match is an error: pctl never deploys to or destroys on an
ambiguous target.
"""

from functools import reduce
from typing import TYPE_CHECKING, Iterable, List, Optional, Set

from pctl.api import PortainerApi
from pctl.exceptions import AmbiguousSelectionError, SelectionError
from pctl.logger import CommandLogger
from pctl.models.commands import (
    ById,
    ByName,
    ByTagIds,
    ByTagNames,
    EndpointSelector,
    FileMapping,
    InlineEnv,
)
from pctl.services.handle import ConsumableHandle
from pctl.transport import Transport

if TYPE_CHECKING:
    from pctl.services.authenticator import Session
    from pctl.services.plan_executor import Plan


class Endpoint(ConsumableHandle):
    """A session narrowed down to one endpoint id."""

    handle_label = "endpoint"

    def __init__(
        self,
        transport: Transport,
        endpoint_id: int,
        logger: Optional[CommandLogger] = None,
    ):
        super().__init__()
        self._transport = transport
        self._id = endpoint_id
        self._swarm_id: Optional[str] = None
        self.logger = logger

    @property
    def id(self) -> int:
        return self._id

    @property
    def api(self) -> PortainerApi:
        self.ensure_live()
        return PortainerApi(self._transport)

    @property
    def swarm_id(self) -> str:
        """Swarm id of the endpoint, fetched on first access."""
        if self._swarm_id is None:
            self._swarm_id = self.api.swarm_id(self._id)
            if self.logger:
                self.logger.log(f"Endpoint {self._id} belongs to swarm {self._swarm_id}")
        return self._swarm_id

    def release_transport(self) -> Transport:
        """Hand the transport to the plan and retire this endpoint."""
        self.consume()
        return self._transport

    def deploy(
        self,
        stack: str,
        compose: str,
        inline_vars: Iterable[InlineEnv] = (),
        configs: Iterable[FileMapping] = (),
        secrets: Iterable[FileMapping] = (),
    ) -> "Plan":
        """Build a deploy plan; consumes this endpoint."""
        from pctl.services.plan_builder import PlanBuilder

        return PlanBuilder(logger=self.logger).deploy(
            self, stack, compose, inline_vars, configs, secrets
        )

    def destroy(
        self,
        stacks: Iterable[str] = (),
        configs: Iterable[str] = (),
        secrets: Iterable[str] = (),
    ) -> "Plan":
        """Build a destroy plan; consumes this endpoint."""
        from pctl.services.plan_builder import PlanBuilder

        return PlanBuilder(logger=self.logger).destroy(self, stacks, configs, secrets)

    def __repr__(self) -> str:
        return f"Endpoint(id={self._id})"


class EndpointResolver:
    """
    Endpoint resolution service.

    Selectors:
    - ById: taken verbatim, no request
    - ByName: server-side name filter
    - ByTagIds: server-side tag filter (endpoint must carry every tag)
    - ByTagNames: intersection of each named tag's endpoints
    """

    def __init__(self, logger: Optional[CommandLogger] = None):
        self.logger = logger

    def resolve(self, session: "Session", selector: EndpointSelector) -> Endpoint:
        """
        Resolve a selector to one endpoint.

        Args:
            session: Authenticated session (consumed on success)
            selector: Endpoint selector

        Returns:
            Endpoint handle owning the session's transport

        Raises:
            AmbiguousSelectionError: If other than one endpoint matches
            SelectionError: If a tag-name selector cannot be evaluated
            TransportError: If a lookup request fails
        """
        if isinstance(selector, ById):
            endpoint_id = selector.endpoint_id
        else:
            candidates = self.candidates(session.api, selector)
            endpoint_id = self._exactly_one(candidates)

        if self.logger:
            self.logger.log(f"Selected endpoint {endpoint_id} by {selector.describe()}")

        return Endpoint(session.release_transport(), endpoint_id, logger=self.logger)

    def candidates(self, api: PortainerApi, selector: EndpointSelector) -> Set[int]:
        """Endpoint ids matching a (non-id) selector."""
        if isinstance(selector, ByName):
            return {e.id for e in api.list_endpoints(name=selector.name)}
        if isinstance(selector, ByTagIds):
            if not selector.tag_ids:
                raise SelectionError("No tag ids given for endpoint selection")
            return {e.id for e in api.list_endpoints(tag_ids=selector.tag_ids)}
        if isinstance(selector, ByTagNames):
            return self._by_tag_names(api, selector.names)
        raise TypeError(f"Unsupported endpoint selector: {selector!r}")

    def _by_tag_names(self, api: PortainerApi, names: Iterable[str]) -> Set[int]:
        requested = set(names)
        if not requested:
            raise SelectionError("No tag names given for endpoint selection")

        tags = [tag for tag in api.list_tags() if tag.name in requested]
        missing = requested - {tag.name for tag in tags}
        if missing:
            raise SelectionError(
                f"Unknown tag(s): {', '.join(sorted(missing))}",
                context="Tag names must match existing tags exactly",
            )

        endpoint_sets: List[Set[int]] = [set(tag.endpoint_ids) for tag in tags]
        return reduce(lambda acc, ids: acc & ids, endpoint_sets)

    @staticmethod
    def _exactly_one(candidates: Set[int]) -> int:
        if len(candidates) != 1:
            raise AmbiguousSelectionError(len(candidates), candidates)
        return next(iter(candidates))
