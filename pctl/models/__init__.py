"""
pctl Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .credentials import (
    Credential,
    CredentialKind,
    SessionData,
)
from .records import (
    DockerObject,
    EndpointRecord,
    StackRecord,
    Tag,
)
from .commands import (
    ById,
    ByName,
    ByTagIds,
    ByTagNames,
    DeployOptions,
    DestroyOptions,
    EndpointSelector,
    FileMapping,
    InlineEnv,
    LoginOptions,
    LogoutOptions,
    SavedSession,
    ServerConfig,
    TokenLogin,
    UserPassLogin,
)
from .results import (
    ExecutionReport,
    ResultStatus,
)
from .plan import (
    CreateStack,
    DeployPlan,
    DestroyPlan,
    PlanDefinition,
    PlanKind,
    ResourceRef,
    StackAction,
    StackDisposition,
    UpdateStack,
    merge_env,
)

__all__ = [
    # Credentials
    "Credential",
    "CredentialKind",
    "SessionData",
    # Records
    "DockerObject",
    "EndpointRecord",
    "StackRecord",
    "Tag",
    # Commands
    "ById",
    "ByName",
    "ByTagIds",
    "ByTagNames",
    "DeployOptions",
    "DestroyOptions",
    "EndpointSelector",
    "FileMapping",
    "InlineEnv",
    "LoginOptions",
    "LogoutOptions",
    "SavedSession",
    "ServerConfig",
    "TokenLogin",
    "UserPassLogin",
    # Plans
    "CreateStack",
    "DeployPlan",
    "DestroyPlan",
    "PlanDefinition",
    "PlanKind",
    "ResourceRef",
    "StackAction",
    "StackDisposition",
    "UpdateStack",
    "merge_env",
    # Results
    "ExecutionReport",
    "ResultStatus",
]
