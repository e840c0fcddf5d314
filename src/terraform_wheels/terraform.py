"""Subprocess wrapper around the terraform binary."""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from pathlib import Path

from terraform_wheels.errors import FormatError, TerraformNotFoundError, TerraformRunError

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"Terraform v(\d+\.\d+\.\d+\S*)")


def find_terraform(
    project_dir: Path,
    binary: str | None = None,
    bin_dir: str = ".terraform-wheels/bin",
) -> Path | None:
    """Locate a terraform binary.

    Order: the explicit ``binary``, ``<project_dir>/<bin_dir>/terraform``, then
    ``PATH``. Returns None when nothing executable is found.
    """
    if binary:
        path = Path(binary).expanduser()
        if path.is_file() and os.access(path, os.X_OK):
            return path
        logger.warning("Configured terraform binary %s is not executable", path)
        return None

    local = project_dir / bin_dir / "terraform"
    if local.is_file() and os.access(local, os.X_OK):
        return local

    found = shutil.which("terraform")
    return Path(found) if found else None


class TerraformWrapper:
    """Runs terraform in a project directory with inherited stdio."""

    def __init__(self, binary: Path, cwd: Path) -> None:
        self.binary = binary
        self.cwd = cwd

    def __repr__(self) -> str:
        return f"TerraformWrapper(binary={str(self.binary)!r}, cwd={str(self.cwd)!r})"

    def invoke(self, args: list[str]) -> None:
        """Run ``terraform <args>`` and block until it exits.

        Raises:
            TerraformRunError: If terraform exits with a non-zero status
            TerraformNotFoundError: If the binary cannot be executed
        """
        cmd = [str(self.binary), *args]
        logger.debug("Running %s in %s", cmd, self.cwd)
        try:
            result = subprocess.run(cmd, cwd=self.cwd)
        except OSError as e:
            raise TerraformNotFoundError(f"Could not execute {self.binary}: {e}") from e

        if result.returncode != 0:
            raise TerraformRunError(args, result.returncode)

    def version(self) -> str | None:
        """Installed terraform version (e.g. ``0.12.31``), or None if unknown."""
        try:
            result = subprocess.run(
                [str(self.binary), "version"],
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=30,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug("terraform version failed: %s", e)
            return None

        match = _VERSION_RE.search(result.stdout)
        return match.group(1) if match else None

    def fmt(self, content: bytes) -> bytes:
        """Canonically format HCL via ``terraform fmt -``.

        Raises:
            FormatError: If terraform cannot parse ``content``
        """
        try:
            result = subprocess.run(
                [str(self.binary), "fmt", "-"],
                cwd=self.cwd,
                input=content,
                capture_output=True,
            )
        except OSError as e:
            raise FormatError(f"Could not execute {self.binary}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise FormatError(stderr or f"terraform fmt exited with status {result.returncode}")
        return result.stdout
