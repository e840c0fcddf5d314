"""Pydantic models for the terraform-wheels configuration file."""

from typing import Literal

from pydantic import BaseModel, Field


class TerraformConfig(BaseModel):
    """How the terraform binary is located and which commands pass through."""

    binary: str | None = Field(
        default=None,
        description="Explicit path to the terraform binary (default: search bin_dir, then PATH)",
    )
    bin_dir: str = Field(
        default=".terraform-wheels/bin",
        description="Project-relative directory searched for a terraform binary",
    )
    required_version_prefix: str = Field(
        default="0.12.",
        description="terraform version prefix this tool is tested against",
    )
    extra_commands: list[str] = Field(
        default_factory=list,
        description="Additional terraform subcommands to forward untouched",
    )
    propagate_exit_code: bool = Field(
        default=False,
        description="Exit with terraform's own status when it fails (default: exit 0)",
    )


class PluginsConfig(BaseModel):
    """Plugin selection."""

    disabled: list[str] = Field(
        default_factory=list,
        description="Names of built-in or installed plugins to leave out of the registry",
    )
    discover_entry_points: bool = Field(
        default=True,
        description="Load third-party plugins from the terraform_wheels.plugins entry point group",
    )


class LoggingConfig(BaseModel):
    """Diagnostic logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING", description="Log level for diagnostic output on stderr"
    )


class UpgradeConfig(BaseModel):
    """Self-upgrade settings."""

    package: str = Field(default="terraform-wheels", description="Distribution name on the index")
    index_url: str = Field(
        default="https://pypi.org/pypi",
        description="Base URL of a PyPI-compatible JSON API",
    )
    timeout: float = Field(default=10.0, description="HTTP timeout in seconds", gt=0)


class WheelsConfig(BaseModel):
    """Root configuration model."""

    terraform: TerraformConfig = Field(default_factory=TerraformConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    upgrade: UpgradeConfig = Field(default_factory=UpgradeConfig)
