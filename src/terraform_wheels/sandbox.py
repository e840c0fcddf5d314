"""The project directory terraform-wheels operates in."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from terraform_wheels.config.schema import TerraformConfig
from terraform_wheels.errors import SandboxError, TerraformNotFoundError
from terraform_wheels.terraform import TerraformWrapper, find_terraform

logger = logging.getLogger(__name__)

TERRAFORM_FILE_PATTERNS = ("*.tf", "*.tf.json")

_MODULE_SOURCE_RE = re.compile(r'^\s*source\s*=\s*"([^"]+)"', re.MULTILINE)
_PROVIDER_RE = re.compile(r'^\s*provider\s+"([^"]+)"', re.MULTILINE)


@dataclass
class TerraformProject:
    """What the ``.tf`` files of a project declare, as far as plugins care."""

    files: list[str] = field(default_factory=list)
    module_sources: list[str] = field(default_factory=list)
    providers: list[str] = field(default_factory=list)

    def uses_module(self, fragment: str) -> bool:
        return any(fragment in source for source in self.module_sources)

    def uses_provider(self, name: str) -> bool:
        return name in self.providers


def _terraform_files(path: Path) -> list[Path]:
    found: set[Path] = set()
    for pattern in TERRAFORM_FILE_PATTERNS:
        found.update(p for p in path.glob(pattern) if p.is_file())
    return sorted(found)


def scan_project(path: Path) -> TerraformProject:
    """Read every terraform file in ``path`` and collect module sources and providers."""
    project = TerraformProject()
    for tf_file in _terraform_files(path):
        try:
            text = tf_file.read_text(encoding="utf-8")
        except OSError as e:
            raise SandboxError(f"Could not read {tf_file}: {e}") from e
        project.files.append(tf_file.name)
        project.module_sources.extend(_MODULE_SOURCE_RE.findall(text))
        for provider in _PROVIDER_RE.findall(text):
            if provider not in project.providers:
                project.providers.append(provider)
    return project


class ProjectSandbox:
    """State of the working directory as a terraform project.

    :meth:`has_terraform_files` always rescans the directory; :attr:`project`
    is a snapshot refreshed only by :meth:`reload_terraform_project`.
    """

    def __init__(self, path: Path, terraform_config: TerraformConfig | None = None) -> None:
        self.path = path
        self.terraform_config = terraform_config or TerraformConfig()
        self._terraform: TerraformWrapper | None = None
        self.project = scan_project(path)

    def has_terraform_files(self) -> bool:
        try:
            return bool(_terraform_files(self.path))
        except OSError as e:
            raise SandboxError(f"Could not list {self.path}: {e}") from e

    def reload_terraform_project(self) -> None:
        self.project = scan_project(self.path)
        logger.debug("Reloaded project: %s", self.project)

    def find_terraform(self) -> Path | None:
        return find_terraform(
            self.path,
            binary=self.terraform_config.binary,
            bin_dir=self.terraform_config.bin_dir,
        )

    def has_terraform(self) -> bool:
        return self.find_terraform() is not None

    def get_terraform(self) -> TerraformWrapper:
        """The terraform handle bound to this directory, created on first use.

        Raises:
            TerraformNotFoundError: If no terraform binary is available
        """
        if self._terraform is not None:
            return self._terraform

        binary = self.find_terraform()
        if binary is None:
            raise TerraformNotFoundError(
                "terraform was not found. Install terraform "
                f"{self.terraform_config.required_version_prefix}x, put it on your PATH "
                f"or in {self.terraform_config.bin_dir}"
            )

        tf = TerraformWrapper(binary, self.path)
        version = tf.version()
        if version and not version.startswith(self.terraform_config.required_version_prefix):
            logger.warning(
                "terraform %s found, this tool expects %sx",
                version,
                self.terraform_config.required_version_prefix,
            )
        self._terraform = tf
        return tf

    def file_path(self, name: str) -> Path:
        return self.path / name

    def read_file(self, name: str) -> str | None:
        """Contents of ``name`` in the project, or None if it does not exist."""
        path = self.file_path(name)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise SandboxError(f"Could not read {path}: {e}") from e

    def write_file(self, name: str, content: bytes) -> Path:
        path = self.file_path(name)
        try:
            path.write_bytes(content)
        except OSError as e:
            raise SandboxError(f"Could not write {path}: {e}") from e
        logger.info("Wrote %s", path)
        return path


def open_sandbox(path: Path, terraform_config: TerraformConfig | None = None) -> ProjectSandbox:
    """Open ``path`` as a project sandbox.

    Raises:
        SandboxError: If ``path`` is not a readable directory
    """
    if not path.is_dir():
        raise SandboxError(f"{path} is not a directory")
    return ProjectSandbox(path, terraform_config)
