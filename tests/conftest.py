"""Shared fixtures."""

import pytest

from buildnotify.config import NotifyConfig
from buildnotify.models import Author, Build, CommitMessage, Repo
from buildnotify.plugin import Plugin


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("BUILDNOTIFY_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.delenv("BUILDNOTIFY_CONFIG", raising=False)


@pytest.fixture
def repo():
    return Repo(owner="acme", name="api", link="https://git.example.com/acme/api")


@pytest.fixture
def build():
    return Build(
        event="push",
        number=42,
        commit="abcdef1234567890",
        branch="main",
        status="success",
        link="https://ci.example.com/acme/api/42",
        author=Author(username="bob", name="Bob Smith", email="bob@example.com"),
        message=CommitMessage("Fix flaky test\n\nThe retry loop never ended.\n"),
        started=1_700_000_000,
        finished=1_700_000_065,
    )


@pytest.fixture
def plugin(repo, build):
    return Plugin(repo=repo, build=build, config=NotifyConfig(webhook="https://hooks.example.com/x"))
