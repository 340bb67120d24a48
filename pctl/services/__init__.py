"""
pctl Services Layer

The orchestration pipeline: Authenticator -> Session -> EndpointResolver ->
Endpoint -> PlanBuilder -> Plan -> PlanExecutor.
"""

from .session_store import SessionStore, YamlSessionStore
from .authenticator import Authenticator, Session
from .endpoint_resolver import Endpoint, EndpointResolver
from .plan_executor import Plan, PlanExecutor
from .plan_builder import PlanBuilder

__all__ = [
    "SessionStore",
    "YamlSessionStore",
    "Authenticator",
    "Session",
    "Endpoint",
    "EndpointResolver",
    "Plan",
    "PlanExecutor",
    "PlanBuilder",
]
