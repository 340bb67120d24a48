"""Tests for the YAML-backed session store."""

import os
import stat

import pytest
import yaml

from pctl.exceptions import PersistError, UnknownSessionError
from pctl.models.credentials import CredentialKind, SessionData
from pctl.services.session_store import YamlSessionStore


@pytest.fixture
def sessions_file(tmp_path):
    return tmp_path / "home" / "sessions.yml"


@pytest.fixture
def store(sessions_file):
    return YamlSessionStore(sessions_file)


def test_save_and_get_round_trip(store):
    data = SessionData("https://portainer.example.com", CredentialKind.API_TOKEN, "ptr_abc")

    store.save("prod", data)

    assert store.get("prod") == data


def test_saved_file_layout(store, sessions_file):
    store.save("prod", SessionData("https://p", CredentialKind.BEARER, "jwt"))

    with open(sessions_file) as f:
        document = yaml.safe_load(f)

    assert document == {
        "sessions": {
            "prod": {
                "address": "https://p",
                "credential": {"kind": "bearer-token", "value": "jwt"},
            }
        }
    }


def test_sessions_file_is_private(store, sessions_file):
    store.save("prod", SessionData("https://p", CredentialKind.API_TOKEN, "ptr"))

    assert stat.S_IMODE(os.stat(sessions_file).st_mode) == 0o600


def test_save_keeps_other_sessions(store):
    store.save("prod", SessionData("https://prod", CredentialKind.API_TOKEN, "a"))
    store.save("dev", SessionData("https://dev", CredentialKind.API_TOKEN, "b"))
    store.save("prod", SessionData("https://prod", CredentialKind.API_TOKEN, "c"))

    assert store.get("prod").value == "c"
    assert store.get("dev").value == "b"


def test_get_missing_session(store):
    with pytest.raises(UnknownSessionError):
        store.get("prod")


def test_remove(store):
    store.save("prod", SessionData("https://p", CredentialKind.API_TOKEN, "ptr"))

    store.remove("prod")

    with pytest.raises(UnknownSessionError):
        store.get("prod")


def test_remove_absent_name_is_not_an_error(store, sessions_file):
    store.remove("never-saved")

    assert not sessions_file.exists()


def test_invalid_yaml_raises_persist_error(store, sessions_file):
    sessions_file.parent.mkdir(parents=True)
    sessions_file.write_text("sessions: [unclosed\n")

    with pytest.raises(PersistError):
        store.get("prod")


def test_sessions_not_a_mapping(store, sessions_file):
    sessions_file.parent.mkdir(parents=True)
    sessions_file.write_text("sessions:\n  - prod\n")

    with pytest.raises(PersistError):
        store.get("prod")


def test_malformed_entry(store, sessions_file):
    sessions_file.parent.mkdir(parents=True)
    sessions_file.write_text("sessions:\n  prod:\n    address: https://p\n")

    with pytest.raises(PersistError):
        store.get("prod")


def test_anonymous_session_data_is_rejected():
    with pytest.raises(ValueError):
        SessionData("https://p", CredentialKind.ANONYMOUS, "")
