"""Terraform configuration file generation from command flags."""

from terraform_wheels.generator.config_file import (
    TerraformFileConfig,
    format_flag_help,
    wrap_long_lines,
)
from terraform_wheels.generator.flags import Flag, FlagSet, FlagVisit
from terraform_wheels.generator.formatter import Formatter, TerraformFormatter
from terraform_wheels.generator.merge import FlagMerger

__all__ = [
    "Flag",
    "FlagMerger",
    "FlagSet",
    "FlagVisit",
    "Formatter",
    "TerraformFileConfig",
    "TerraformFormatter",
    "format_flag_help",
    "wrap_long_lines",
]
