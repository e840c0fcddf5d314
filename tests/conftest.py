"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from terraform_wheels.config.schema import WheelsConfig
from terraform_wheels.errors import TerraformRunError
from terraform_wheels.plugins.base import Command, Plugin
from terraform_wheels.sandbox import ProjectSandbox
from terraform_wheels.terraform import TerraformWrapper


class RecordingPlugin(Plugin):
    """Plugin that records every hook call into a shared event list."""

    def __init__(
        self,
        name: str,
        events: list[tuple],
        used: bool = True,
        commands: list[Command] | None = None,
        fail_on: str | None = None,
    ) -> None:
        self.name = name
        self.events = events
        self.used = used
        self._commands = commands or []
        self.fail_on = fail_on

    def commands(self) -> list[Command]:
        return list(self._commands)

    def is_used(self, sandbox) -> bool:
        self.events.append((self.name, "is_used"))
        if self.fail_on == "is_used":
            raise RuntimeError(f"{self.name} is_used exploded")
        return self.used

    def before_run(self, sandbox, tf, is_init) -> None:
        self.events.append((self.name, "before_run", is_init))
        if self.fail_on == "before_run":
            raise RuntimeError(f"{self.name} before_run exploded")

    def after_run(self, sandbox, tf, run_error) -> None:
        self.events.append((self.name, "after_run", run_error))
        if self.fail_on == "after_run":
            raise RuntimeError(f"{self.name} after_run exploded")


@pytest.fixture
def events() -> list[tuple]:
    return []


@pytest.fixture
def make_plugin(events: list[tuple]):
    """Factory for RecordingPlugin instances sharing the ``events`` list."""

    def _make(name: str, **kwargs) -> RecordingPlugin:
        return RecordingPlugin(name, events, **kwargs)

    return _make


@pytest.fixture
def default_config() -> WheelsConfig:
    """Provide a default configuration for tests."""
    return WheelsConfig()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def sandbox(project_dir: Path) -> ProjectSandbox:
    return ProjectSandbox(project_dir)


@pytest.fixture
def fake_tf(project_dir: Path, events: list[tuple]) -> MagicMock:
    """A TerraformWrapper double: records invocations, formats by passing through."""
    tf = MagicMock(spec=TerraformWrapper)
    tf.cwd = project_dir
    tf.invoke.side_effect = lambda args: events.append(("terraform", list(args)))
    tf.fmt.side_effect = lambda content: content
    return tf


@pytest.fixture
def failing_tf(fake_tf: MagicMock, events: list[tuple]) -> MagicMock:
    def _fail(args):
        events.append(("terraform", list(args)))
        raise TerraformRunError(list(args), 3)

    fake_tf.invoke.side_effect = _fail
    return fake_tf


@pytest.fixture
def console_output() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer


@pytest.fixture
def passthrough_formatter():
    """Formatter that only guarantees a trailing newline."""

    def _format(content: bytes) -> bytes:
        if content and not content.endswith(b"\n"):
            return content + b"\n"
        return content

    return _format
