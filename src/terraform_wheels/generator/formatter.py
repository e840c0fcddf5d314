"""Formatters that normalize generated configuration text."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from terraform_wheels.terraform import TerraformWrapper


class Formatter(Protocol):
    """Canonical structural formatting of configuration text.

    Implementations raise on text they cannot parse.
    """

    def __call__(self, content: bytes) -> bytes: ...


class TerraformFormatter:
    """Formats through ``terraform fmt -``."""

    def __init__(self, tf: TerraformWrapper) -> None:
        self.tf = tf

    def __call__(self, content: bytes) -> bytes:
        return self.tf.fmt(content)
