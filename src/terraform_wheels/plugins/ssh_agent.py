"""Makes an SSH agent with the cluster key available while terraform runs.

The dcos-terraform modules provision nodes over SSH and expect the key to be
loaded in an agent. When no agent is reachable, one is started for the
duration of the terraform run and stopped afterwards.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from pathlib import Path

from terraform_wheels.errors import PluginError
from terraform_wheels.plugins.base import Plugin
from terraform_wheels.sandbox import ProjectSandbox
from terraform_wheels.terraform import TerraformWrapper

logger = logging.getLogger(__name__)

SSH_KEY_ENV_VAR = "TFW_SSH_KEY"
DEFAULT_SSH_KEY = "~/.ssh/id_rsa"

_AGENT_VAR_RE = re.compile(r"(SSH_AUTH_SOCK|SSH_AGENT_PID)=([^;]+);")


def parse_agent_output(output: str) -> dict[str, str]:
    """Extract ``SSH_AUTH_SOCK``/``SSH_AGENT_PID`` from ``ssh-agent -s`` output."""
    return dict(_AGENT_VAR_RE.findall(output))


class SshAgentPlugin(Plugin):
    """Starts ``ssh-agent`` around terraform runs of dcos-terraform projects."""

    name = "ssh-agent"

    def __init__(self, key_file: str | None = None) -> None:
        self.key_file = Path(key_file or os.environ.get(SSH_KEY_ENV_VAR, DEFAULT_SSH_KEY)).expanduser()
        self._started: dict[str, str] = {}

    def is_used(self, sandbox: ProjectSandbox) -> bool:
        return sandbox.project.uses_module("dcos-terraform/")

    def before_run(self, sandbox: ProjectSandbox, tf: TerraformWrapper, is_init: bool) -> None:
        # init only downloads modules and providers
        if is_init:
            return
        if os.environ.get("SSH_AUTH_SOCK"):
            logger.debug("Using existing SSH agent at %s", os.environ["SSH_AUTH_SOCK"])
            return
        if not self.key_file.exists():
            raise PluginError(
                self.name,
                f"SSH key {self.key_file} not found, set ${SSH_KEY_ENV_VAR} to your private key",
            )

        try:
            result = subprocess.run(["ssh-agent", "-s"], capture_output=True, text=True, check=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise PluginError(self.name, f"could not start ssh-agent: {e}") from e

        env = parse_agent_output(result.stdout)
        if "SSH_AUTH_SOCK" not in env:
            raise PluginError(self.name, "ssh-agent did not report SSH_AUTH_SOCK")
        os.environ.update(env)
        self._started = env
        logger.info("Started ssh-agent (pid %s)", env.get("SSH_AGENT_PID", "?"))

        try:
            subprocess.run(["ssh-add", str(self.key_file)], check=True)
        except (OSError, subprocess.CalledProcessError) as e:
            # after_run is never reached when a pre-run hook fails
            try:
                self._stop_agent()
            except PluginError as stop_error:
                logger.warning("%s", stop_error)
            raise PluginError(self.name, f"could not add {self.key_file} to ssh-agent: {e}") from e

    def after_run(
        self,
        sandbox: ProjectSandbox,
        tf: TerraformWrapper,
        run_error: Exception | None,
    ) -> None:
        if self._started:
            self._stop_agent()

    def _stop_agent(self) -> None:
        try:
            subprocess.run(["ssh-agent", "-k"], capture_output=True, check=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise PluginError(self.name, f"could not stop ssh-agent: {e}") from e
        finally:
            for var in self._started:
                os.environ.pop(var, None)
            self._started = {}
        logger.info("Stopped ssh-agent")
