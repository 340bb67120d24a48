"""Tests for the command logger."""

import pytest

from pctl.logger import CommandLogger


@pytest.fixture
def logger(tmp_path, console):
    return CommandLogger("deploy", tmp_path, console=console)


def test_log_file_location(logger, tmp_path):
    assert logger.log_path.parent.parent == tmp_path
    assert logger.log_path.name.endswith("_deploy.log")


def test_steps_are_written_to_file(logger, output):
    logger.step("Planning")
    logger.success("create stack 'web'")
    logger.warning("2 stacks named 'web'")
    logger.log_request("GET", "/api/stacks")
    logger.close()

    text = logger.log_path.read_text()
    assert "Operation: deploy" in text
    assert "[INFO] Step: Planning" in text
    assert "[WARNING] 2 stacks named 'web'" in text
    assert "[DEBUG] GET /api/stacks" in text
    assert "Status: SUCCESS" in text

    # Debug lines stay out of the non-verbose console
    assert "Planning" in output.getvalue()
    assert "GET /api/stacks" not in output.getvalue()


def test_errors_mark_the_log_failed(logger, output):
    logger.log_error("Session 'prod' not found", context="Run: pctl login prod")
    logger.close()

    text = logger.log_path.read_text()
    assert "ERROR OCCURRED" in text
    assert "Context: Run: pctl login prod" in text
    assert "Status: FAILED" in text
    assert "Session 'prod' not found" in output.getvalue()


def test_verbose_mirrors_everything_to_console(tmp_path, console, output):
    logger = CommandLogger("destroy", tmp_path, verbose=True, console=console)

    logger.log_request("DELETE", "/api/stacks/6")
    logger.close()

    assert "DELETE /api/stacks/6" in output.getvalue()


def test_close_is_idempotent(logger):
    logger.close()
    logger.close()

    assert logger.log_path.read_text().count("Completed:") == 1


def test_bracketed_text_is_printed_literally(logger, output):
    logger.step("Destroy [/x]")
    logger.warning("Not found on endpoint 3: stack '[/x]'")
    logger.log_error("Stack '[bold]web' failed", context="HTTP 500 [/red]")

    printed = output.getvalue()
    assert "Destroy [/x]" in printed
    assert "stack '[/x]'" in printed
    assert "Stack '[bold]web' failed" in printed
    assert "HTTP 500 [/red]" in printed


def test_verbose_output_is_printed_literally(tmp_path, console, output):
    logger = CommandLogger("deploy", tmp_path, verbose=True, console=console)

    logger.log("env [/TAG]", "ERROR")
    logger.close()

    assert "env [/TAG]" in output.getvalue()
