"""Create search methods from configurations or configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from ..config import (
    ConfigurationError,
    HookeJeevesConfig,
    MethodConfig,
    NelderMeadConfig,
    load_config,
)
from .hookejeeves import HookeJeeves
from .neldermead import NelderMead

Method = Union[NelderMead, HookeJeeves]


def create_method(config: MethodConfig) -> Method:
    """Instantiate the method matching the configuration's variant."""

    if isinstance(config, NelderMeadConfig):
        return NelderMead(config)
    if isinstance(config, HookeJeevesConfig):
        return HookeJeeves(config)
    raise ConfigurationError(f"Unknown method configuration {type(config).__name__}")


def create_from_file(path: Path) -> Method:
    return create_method(load_config(path))


__all__ = ["Method", "create_from_file", "create_method"]
