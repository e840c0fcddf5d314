"""Shared fixtures for CLI tests."""

import pytest

from terraform_wheels.plugins.base import Command
from terraform_wheels.plugins.registry import PluginRegistry


@pytest.fixture
def handled(events):
    """Command handler that records the arguments it was called with."""

    def _handle(args, sandbox, tf):
        events.append(("handler", list(args)))

    return _handle


@pytest.fixture
def registry(make_plugin, handled):
    return PluginRegistry(
        [
            make_plugin("alpha", commands=[Command("add-thing", "Add a thing", handled)]),
            make_plugin("beta", used=False),
        ]
    )


@pytest.fixture
def tf_sandbox(sandbox, fake_tf, monkeypatch):
    """Sandbox whose terraform is the ``fake_tf`` double."""
    monkeypatch.setattr(sandbox, "has_terraform", lambda: True)
    monkeypatch.setattr(sandbox, "get_terraform", lambda: fake_tf)
    return sandbox
