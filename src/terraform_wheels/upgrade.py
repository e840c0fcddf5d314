"""Self-upgrade through the package index.

``wheels-upgrade`` installs the newest release with pip, logging pip's output
to a temporary file, then runs the freshly installed entry point with
``wheels-complete-upgrade <log>`` so the new version confirms the upgrade and
cleans up after itself.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path

import httpx
from packaging.version import InvalidVersion, Version

from terraform_wheels.config.schema import UpgradeConfig
from terraform_wheels.errors import UpgradeError

logger = logging.getLogger(__name__)


@dataclass
class Release:
    """A published release of the package."""

    version: Version
    url: str = ""


def get_latest_version(config: UpgradeConfig | None = None) -> Release:
    """Query the index JSON API for the newest non-prerelease version.

    Raises:
        UpgradeError: If the index cannot be reached or answers nonsense
    """
    config = config or UpgradeConfig()
    url = f"{config.index_url.rstrip('/')}/{config.package}/json"

    try:
        response = httpx.get(url, timeout=config.timeout, follow_redirects=True)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPError as e:
        raise UpgradeError(f"Could not check for new versions at {url}: {e}") from e
    except ValueError as e:
        raise UpgradeError(f"Invalid response from {url}: {e}") from e

    candidates: list[Version] = []
    for raw in data.get("releases", {}) or {}:
        try:
            version = Version(raw)
        except InvalidVersion:
            logger.debug("Ignoring unparseable version %r", raw)
            continue
        if not version.is_prerelease:
            candidates.append(version)

    if not candidates:
        latest = data.get("info", {}).get("version")
        if not latest:
            raise UpgradeError(f"No releases of {config.package} found at {url}")
        try:
            candidates.append(Version(latest))
        except InvalidVersion as e:
            raise UpgradeError(f"Invalid version '{latest}' at {url}") from e

    newest = max(candidates)
    project_url = data.get("info", {}).get("project_url") or ""
    return Release(version=newest, url=project_url)


def is_newer(release: Release, current: str) -> bool:
    try:
        return release.version > Version(current)
    except InvalidVersion:
        # Development builds carry no comparable version
        return True


def perform_upgrade(release: Release, config: UpgradeConfig | None = None) -> None:
    """Install ``release`` with pip and hand over to the new version.

    Raises:
        UpgradeError: If pip fails
    """
    config = config or UpgradeConfig()
    log_fd, log_name = tempfile.mkstemp(prefix="terraform-wheels-upgrade-", suffix=".log")
    os.close(log_fd)
    log_path = Path(log_name)

    cmd = [
        sys.executable,
        "-m",
        "pip",
        "install",
        "--upgrade",
        "--log",
        str(log_path),
        f"{config.package}=={release.version}",
    ]
    logger.debug("Running %s", cmd)
    try:
        subprocess.run(cmd, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise UpgradeError(f"pip could not install {config.package} {release.version}: {e}") from e

    subprocess.run(
        [sys.executable, "-m", "terraform_wheels", "wheels-complete-upgrade", str(log_path)],
        check=False,
    )


def complete_upgrade(path: str | Path) -> None:
    """Remove what the previous version left behind at ``path``."""
    path = Path(path)
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise UpgradeError(f"Could not remove {path}: {e}") from e
