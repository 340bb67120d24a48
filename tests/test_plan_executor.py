"""Tests for plan confirmation and execution."""

import base64
import io

import pytest

from pctl.exceptions import HandleConsumedError, LocalFileError, TransportError
from pctl.models.commands import FileMapping, InlineEnv
from pctl.models.plan import (
    CreateStack,
    DeployPlan,
    DestroyPlan,
    ResourceRef,
    UpdateStack,
    merge_env,
)
from pctl.models.results import ResultStatus
from pctl.services.plan_executor import Plan


@pytest.fixture
def files(tmp_path):
    (tmp_path / "nginx.conf").write_bytes(b"server {}\n")
    (tmp_path / "db.txt").write_bytes(b"hunter2")
    return tmp_path


@pytest.fixture
def deploy_plan(fake_transport, files):
    definition = DeployPlan(
        stack=CreateStack(name="web", swarm_id="swarm-abc"),
        compose="services: {}\n",
        inline_vars=(InlineEnv("A", "1"), InlineEnv("B", "x"), InlineEnv("A", "2")),
        configs=(FileMapping("nginx", files / "nginx.conf"),),
        secrets=(FileMapping("db", files / "db.txt"),),
    )
    return Plan(definition, 3, fake_transport)


@pytest.fixture
def destroy_plan(fake_transport):
    definition = DestroyPlan(
        stacks=(ResourceRef(6, "web"),),
        configs=(ResourceRef("c1", "nginx"),),
        secrets=(ResourceRef("s1", "db"),),
    )
    return Plan(definition, 3, fake_transport)


def answers(text):
    return io.StringIO(text)


def test_deploy_order_configs_secrets_stack(deploy_plan, fake_transport, console):
    report = deploy_plan.execute(True, console=console)

    assert fake_transport.described() == [
        "POST /api/endpoints/3/docker/configs/create",
        "POST /api/endpoints/3/docker/secrets/create",
        "POST /api/stacks/create/swarm/string",
    ]
    assert report.status is ResultStatus.APPLIED
    assert len(report.applied) == 3


def test_deploy_request_bodies(deploy_plan, fake_transport, console):
    deploy_plan.execute(True, console=console)

    config, secret, stack = fake_transport.calls
    assert config.body == {"Name": "nginx", "Data": base64.b64encode(b"server {}\n").decode()}
    assert secret.body == {"Name": "db", "Data": base64.b64encode(b"hunter2").decode()}
    assert stack.query == (("endpointId", "3"),)
    assert stack.body == {
        "name": "web",
        "swarmID": "swarm-abc",
        "stackFileContent": "services: {}\n",
        "env": [{"name": "A", "value": "2"}, {"name": "B", "value": "x"}],
    }


def test_update_stack_prunes(fake_transport, console):
    definition = DeployPlan(stack=UpdateStack(stack_id=5, name="web"), compose="c")

    Plan(definition, 3, fake_transport).execute(True, console=console)

    (request,) = fake_transport.calls
    assert request.describe() == "PUT /api/stacks/5"
    assert request.query == (("endpointId", "3"),)
    assert request.body == {"stackFileContent": "c", "env": [], "prune": True}


def test_destroy_order_stacks_configs_secrets(destroy_plan, fake_transport, console):
    report = destroy_plan.execute(True, console=console)

    assert fake_transport.described() == [
        "DELETE /api/stacks/6",
        "DELETE /api/endpoints/3/docker/configs/c1",
        "DELETE /api/endpoints/3/docker/secrets/s1",
    ]
    assert fake_transport.calls[0].query == (("endpointId", "3"),)
    assert report.applied == [
        "Deleted stack 'web' (id 6)",
        "Deleted config 'nginx'",
        "Deleted secret 'db'",
    ]


def test_declined_plan_sends_nothing(deploy_plan, fake_transport, console):
    report = deploy_plan.execute(False, console=console, input_stream=answers("no\n"))

    assert report.status is ResultStatus.DECLINED
    assert fake_transport.calls == []


def test_declined_plan_is_consumed(deploy_plan, console):
    deploy_plan.execute(False, console=console, input_stream=answers("NO\n"))
    assert deploy_plan.consumed

    with pytest.raises(HandleConsumedError):
        deploy_plan.execute(True, console=console)


def test_unrecognized_answer_reprompts(destroy_plan, fake_transport, console, output):
    report = destroy_plan.execute(False, console=console, input_stream=answers("maybe\nYES\n"))

    assert report.is_applied
    assert len(fake_transport.calls) == 3
    assert output.getvalue().count("Apply this plan?") == 2
    assert "Please answer 'yes' or 'no'" in output.getvalue()


def test_padded_answer_is_not_accepted(destroy_plan, fake_transport, console, output):
    report = destroy_plan.execute(False, console=console, input_stream=answers(" yes \n"))

    assert not report.is_applied
    assert fake_transport.calls == []
    assert "Please answer 'yes' or 'no'" in output.getvalue()


def test_end_of_input_declines(destroy_plan, fake_transport, console):
    report = destroy_plan.execute(False, console=console, input_stream=answers(""))

    assert report.is_declined
    assert fake_transport.calls == []


def test_first_failure_aborts_remaining_steps(destroy_plan, fake_transport, console):
    fake_transport.on(
        "DELETE",
        "/api/endpoints/3/docker/configs/c1",
        TransportError("DELETE failed", status_code=409),
    )

    with pytest.raises(TransportError):
        destroy_plan.execute(True, console=console)

    # The stack delete already happened and is not rolled back
    assert fake_transport.described() == [
        "DELETE /api/stacks/6",
        "DELETE /api/endpoints/3/docker/configs/c1",
    ]


def test_files_are_read_at_execute_time(deploy_plan, fake_transport, files, console):
    (files / "nginx.conf").unlink()

    with pytest.raises(LocalFileError):
        deploy_plan.execute(True, console=console)

    assert fake_transport.calls == []


def test_empty_destroy_plan_needs_no_confirmation(fake_transport, console):
    plan = Plan(DestroyPlan(unmatched=("stack 'web'",)), 3, fake_transport)

    report = plan.execute(False, console=console, input_stream=answers(""))

    assert report.status is ResultStatus.NOTHING_TO_DO
    assert fake_transport.calls == []


def test_preview_shows_env_keys_not_values(fake_transport, console, output):
    definition = DeployPlan(
        stack=CreateStack(name="web", swarm_id="swarm-abc"),
        compose="c",
        inline_vars=(InlineEnv("DB_PASSWORD", "hunter2"),),
    )

    Plan(definition, 3, fake_transport).print(console)

    text = output.getvalue()
    assert "create stack" in text
    assert "DB_PASSWORD" in text
    assert "hunter2" not in text
    assert fake_transport.calls == []


def test_preview_lists_unmatched_names(fake_transport, console, output):
    plan = Plan(
        DestroyPlan(stacks=(ResourceRef(6, "web"),), unmatched=("secret 'db'",)),
        3,
        fake_transport,
    )

    plan.print(console)

    assert "delete stack" in output.getvalue()
    assert "secret 'db'" in output.getvalue()


def test_merge_env_last_wins_first_position_kept():
    merged = merge_env([InlineEnv("A", "1"), InlineEnv("B", "2"), InlineEnv("A", "3")])

    assert list(merged.items()) == [("A", "3"), ("B", "2")]


def test_preview_prints_bracketed_names_literally(fake_transport, console, output):
    plan = Plan(
        DestroyPlan(stacks=(ResourceRef(6, "[bold]web"),), unmatched=("stack '[/x]'",)),
        3,
        fake_transport,
    )

    plan.print(console)

    assert "[bold]web" in output.getvalue()
    assert "stack '[/x]'" in output.getvalue()
