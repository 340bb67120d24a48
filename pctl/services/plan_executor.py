"""
Plan Execution Service

Applies a plan's operations in a fixed order behind an interactive
confirmation gate. The first failure aborts the remaining operations;
operations already applied stay applied.
"""

import sys
from typing import Callable, List, Optional, TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pctl.api import DOCKER_CONFIGS, DOCKER_SECRETS, PortainerApi
from pctl.constants import CONFIRM_NO, CONFIRM_YES
from pctl.exceptions import PctlError
from pctl.logger import CommandLogger
from pctl.models.plan import (
    CreateStack,
    DeployPlan,
    DestroyPlan,
    PlanDefinition,
    merge_env,
)
from pctl.models.results import ExecutionReport, ResultStatus
from pctl.services.handle import ConsumableHandle
from pctl.transport import Transport
from pctl.utils import read_local_file


class Plan(ConsumableHandle):
    """A plan definition bound to the endpoint and transport it was built for."""

    handle_label = "plan"

    def __init__(
        self,
        definition: PlanDefinition,
        endpoint_id: int,
        transport: Transport,
        logger: Optional[CommandLogger] = None,
    ):
        super().__init__()
        self.definition = definition
        self.endpoint_id = endpoint_id
        self._transport = transport
        self.logger = logger

    def release_transport(self) -> Transport:
        self.consume()
        return self._transport

    def print(self, console: Optional[Console] = None) -> None:
        """Print a preview of the plan (no requests are made)."""
        PlanExecutor(console=console).preview(self)

    def execute(
        self,
        confirmed: bool,
        console: Optional[Console] = None,
        input_stream: Optional[TextIO] = None,
    ) -> ExecutionReport:
        """Execute the plan; consumes it. See PlanExecutor.run."""
        executor = PlanExecutor(console=console, input_stream=input_stream, logger=self.logger)
        return executor.run(self, confirmed)

    def __repr__(self) -> str:
        return f"Plan(kind={self.definition.kind.value}, endpoint={self.endpoint_id})"


class PlanExecutor:
    """
    Plan execution service.

    Order:
    - Deploy: configs -> secrets -> stack (stack may reference them)
    - Destroy: stacks -> configs -> secrets (nothing in use is removed first)
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        input_stream: Optional[TextIO] = None,
        logger: Optional[CommandLogger] = None,
    ):
        """
        Initialize executor.

        Args:
            console: Rich console for preview and prompt (creates new if None)
            input_stream: Where confirmation answers are read (stdin if None)
            logger: Optional command logger
        """
        self.console = console or Console()
        self.input_stream = input_stream
        self.logger = logger

    def run(self, plan: Plan, confirmed: bool) -> ExecutionReport:
        """
        Confirm (unless already confirmed) and execute a plan.

        Args:
            plan: Plan to execute (consumed)
            confirmed: Skip preview and prompt when True

        Returns:
            ExecutionReport; DECLINED when the operator answered 'no'

        Raises:
            TransportError: First failed request (remaining steps skipped)
            DecodeError: First malformed response
            LocalFileError: Config/secret file unreadable at execute time
        """
        plan.ensure_live()
        definition = plan.definition

        if isinstance(definition, DestroyPlan) and definition.is_empty:
            plan.consume()
            if self.logger:
                self.logger.warning("Nothing to destroy")
            return ExecutionReport(definition.kind, ResultStatus.NOTHING_TO_DO)

        if not confirmed:
            self.preview(plan)
            if not self.confirm():
                plan.consume()
                if self.logger:
                    self.logger.log("Operator declined the plan")
                return ExecutionReport(definition.kind, ResultStatus.DECLINED)

        api = PortainerApi(plan.release_transport())
        report = ExecutionReport(definition.kind, ResultStatus.APPLIED)
        steps = self._steps(api, plan.endpoint_id, definition)

        for description, action in steps:
            try:
                action()
            except PctlError:
                if self.logger:
                    self.logger.warning(
                        f"Stopped after {len(report.applied)} of {len(steps)} operation(s); "
                        "applied operations were not rolled back"
                    )
                raise
            report.applied.append(description)
            if self.logger:
                self.logger.success(description)

        return report

    def _steps(
        self, api: PortainerApi, endpoint_id: int, definition: PlanDefinition
    ) -> List[tuple]:
        if isinstance(definition, DeployPlan):
            return self._deploy_steps(api, endpoint_id, definition)
        return self._destroy_steps(api, endpoint_id, definition)

    def _deploy_steps(
        self, api: PortainerApi, endpoint_id: int, plan: DeployPlan
    ) -> List[tuple]:
        steps = []

        def create_object(kind: str, label: str, mapping) -> Callable[[], None]:
            def action():
                data = read_local_file(mapping.path, f"{label} '{mapping.name}'")
                api.create_docker_object(endpoint_id, kind, mapping.name, data)

            return action

        for mapping in plan.configs:
            steps.append(
                (f"Created config '{mapping.name}'", create_object(DOCKER_CONFIGS, "config", mapping))
            )
        for mapping in plan.secrets:
            steps.append(
                (f"Created secret '{mapping.name}'", create_object(DOCKER_SECRETS, "secret", mapping))
            )

        stack = plan.stack
        if isinstance(stack, CreateStack):

            def apply_stack():
                env = merge_env(plan.inline_vars)
                api.create_swarm_stack(endpoint_id, stack.name, stack.swarm_id, plan.compose, env)

            steps.append((f"Created stack '{stack.name}'", apply_stack))
        else:

            def apply_stack():
                env = merge_env(plan.inline_vars)
                api.update_stack(stack.stack_id, endpoint_id, plan.compose, env)

            steps.append((f"Updated stack '{stack.name}' (id {stack.stack_id})", apply_stack))

        return steps

    def _destroy_steps(
        self, api: PortainerApi, endpoint_id: int, plan: DestroyPlan
    ) -> List[tuple]:
        steps = []
        for ref in plan.stacks:
            steps.append(
                (
                    f"Deleted stack '{ref.name}' (id {ref.id})",
                    lambda ref=ref: api.delete_stack(ref.id, endpoint_id),
                )
            )
        for ref in plan.configs:
            steps.append(
                (
                    f"Deleted config '{ref.name}'",
                    lambda ref=ref: api.delete_docker_object(endpoint_id, DOCKER_CONFIGS, ref.id),
                )
            )
        for ref in plan.secrets:
            steps.append(
                (
                    f"Deleted secret '{ref.name}'",
                    lambda ref=ref: api.delete_docker_object(endpoint_id, DOCKER_SECRETS, ref.id),
                )
            )
        return steps

    def preview(self, plan: Plan) -> None:
        """Print a human-readable table of the plan's operations."""
        definition = plan.definition
        table = Table(
            title=f"{definition.kind.value.capitalize()} plan for endpoint {plan.endpoint_id}",
            title_justify="left",
            show_lines=False,
        )
        table.add_column("#", style="dim", justify="right")
        table.add_column("Operation", style="bold")
        table.add_column("Target", style="cyan")
        table.add_column("Details", style="dim")

        rows = []
        if isinstance(definition, DeployPlan):
            for mapping in definition.configs:
                rows.append(("create config", mapping.name, str(mapping.path)))
            for mapping in definition.secrets:
                rows.append(("create secret", mapping.name, str(mapping.path)))

            env_keys = ", ".join(merge_env(definition.inline_vars).keys()) or "-"
            stack = definition.stack
            if isinstance(stack, CreateStack):
                rows.append(("create stack", stack.name, f"swarm {stack.swarm_id}; env: {env_keys}"))
            else:
                rows.append(
                    ("update stack", stack.name, f"id {stack.stack_id}, prune; env: {env_keys}")
                )
        else:
            for ref in definition.stacks:
                rows.append(("delete stack", ref.name, f"id {ref.id}"))
            for ref in definition.configs:
                rows.append(("delete config", ref.name, f"id {ref.id}"))
            for ref in definition.secrets:
                rows.append(("delete secret", ref.name, f"id {ref.id}"))

        for index, (operation, target, details) in enumerate(rows, start=1):
            table.add_row(str(index), operation, escape(target), escape(details))

        self.console.print()
        self.console.print(table)

        if isinstance(definition, DestroyPlan) and definition.unmatched:
            self.console.print(
                f"[dim]Not found (skipped): {escape(', '.join(definition.unmatched))}[/dim]"
            )
        self.console.print()

    def confirm(self) -> bool:
        """
        Ask the operator to confirm until they answer 'yes' or 'no'.

        End of input counts as 'no'.

        Returns:
            True if the operator answered 'yes'
        """
        stream = self.input_stream or sys.stdin

        while True:
            self.console.print(
                f"Apply this plan? Type [bold]{CONFIRM_YES}[/bold] or [bold]{CONFIRM_NO}[/bold]: ",
                end="",
            )
            line = stream.readline()
            if not line:
                self.console.print()
                return False

            # Only the line ending is dropped; " yes " is not a literal answer
            answer = line.rstrip("\r\n").lower()
            if answer == CONFIRM_YES:
                return True
            if answer == CONFIRM_NO:
                return False

            self.console.print(f"[yellow]Please answer '{CONFIRM_YES}' or '{CONFIRM_NO}'.[/yellow]")
