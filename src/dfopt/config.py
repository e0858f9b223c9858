"""Method configurations and their JSON loader.

A configuration is one of a closed set of frozen dataclasses, tagged by the
class-level ``method`` name. Shared run settings live in :class:`RunConfig`.

Example
-------
>>> cfg = parse_config({"method": "NelderMead", "tolerance": 1e-3, "seed": 7})
>>> cfg.method, cfg.tolerance, cfg.run.seed
('neldermead', 0.001, 7)
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Dict, Mapping, Union

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised for unknown names, unreadable files and invalid parameter values."""


def _require(ok: bool, message: str) -> None:
    if not ok:
        raise ConfigurationError(message)


@dataclass(frozen=True)
class RunConfig:
    """Settings shared by every method and by the multi-start harness."""

    seed: int = 1
    numruns: int = 20
    maxevals: int = 20000
    maxevals_cycle: int = 1000

    def __post_init__(self) -> None:
        _require(self.numruns > 0, f"numruns must be positive, got {self.numruns!r}")
        _require(self.maxevals > 0, f"maxevals must be positive, got {self.maxevals!r}")
        _require(
            self.maxevals_cycle > 0,
            f"maxevalscycle must be positive, got {self.maxevals_cycle!r}",
        )


@dataclass(frozen=True)
class NelderMeadConfig:
    method: ClassVar[str] = "neldermead"

    reflection: float = 1.0
    expansion: float = 2.0
    contraction: float = 0.5
    shrink: float = 0.5
    tolerance: float = 1e-2
    run: RunConfig = field(default_factory=RunConfig)

    def __post_init__(self) -> None:
        _require(self.reflection > 0, f"reflection must be > 0, got {self.reflection!r}")
        _require(self.expansion > 1, f"expansion must be > 1, got {self.expansion!r}")
        _require(
            0 < self.contraction < 1,
            f"contraction must be in (0, 1), got {self.contraction!r}",
        )
        _require(0 < self.shrink < 1, f"shrink must be in (0, 1), got {self.shrink!r}")
        _require(self.tolerance >= 0, f"tolerance must be >= 0, got {self.tolerance!r}")


@dataclass(frozen=True)
class HookeJeevesConfig:
    method: ClassVar[str] = "hookejeeves"

    acceleration: float = 1.0
    contraction: float = 0.5
    step: float = 0.01
    min_step: float = 1e-5
    run: RunConfig = field(default_factory=RunConfig)

    def __post_init__(self) -> None:
        _require(
            self.acceleration >= 1,
            f"acceleration must be >= 1, got {self.acceleration!r}",
        )
        _require(
            0 < self.contraction < 1,
            f"contraction must be in (0, 1), got {self.contraction!r}",
        )
        _require(self.step > 0, f"step must be > 0, got {self.step!r}")
        _require(self.min_step >= 0, f"minstep must be >= 0, got {self.min_step!r}")


MethodConfig = Union[NelderMeadConfig, HookeJeevesConfig]

DEFAULT_RUN = RunConfig()
DEFAULT_NELDER_MEAD = NelderMeadConfig()
DEFAULT_HOOKE_JEEVES = HookeJeevesConfig()

# key in the JSON file -> (dataclass field, converter)
_RUN_KEYS: Dict[str, tuple[str, type]] = {
    "seed": ("seed", int),
    "numruns": ("numruns", int),
    "maxevals": ("maxevals", int),
    "maxevalscycle": ("maxevals_cycle", int),
}
_METHOD_KEYS: Dict[str, Dict[str, tuple[str, type]]] = {
    NelderMeadConfig.method: {
        "reflection": ("reflection", float),
        "expansion": ("expansion", float),
        "contraction": ("contraction", float),
        "shrink": ("shrink", float),
        "tolerance": ("tolerance", float),
    },
    HookeJeevesConfig.method: {
        "acceleration": ("acceleration", float),
        "contraction": ("contraction", float),
        "step": ("step", float),
        "minstep": ("min_step", float),
    },
}
_METHOD_TYPES: Dict[str, type] = {
    NelderMeadConfig.method: NelderMeadConfig,
    HookeJeevesConfig.method: HookeJeevesConfig,
}

METHODS = tuple(_METHOD_TYPES)


def normalize_method(name: object) -> str:
    """Return the canonical method name or raise :class:`ConfigurationError`."""

    if not isinstance(name, str):
        raise ConfigurationError(f"Unknown method {name!r}")
    key = name.strip().lower()
    if key not in _METHOD_TYPES:
        raise ConfigurationError(f"Unknown method {name!r}")
    return key


def _convert(key: str, raw: Any, conv: type) -> Any:
    if isinstance(raw, bool):
        raise ConfigurationError(f"{key} must be numeric, got {raw!r}")
    try:
        value = conv(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be numeric, got {raw!r}") from None
    if conv is float and not math.isfinite(value):
        raise ConfigurationError(f"{key} must be finite, got {raw!r}")
    if conv is int and isinstance(raw, float) and not raw.is_integer():
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}")
    return value


def parse_config(data: Mapping[str, Any], method: str | None = None) -> MethodConfig:
    """Build a method configuration from a key/value mapping.

    The method is taken from ``method`` when given, otherwise from the
    ``"method"`` key. Missing keys take the dataclass defaults; unrecognized
    keys are ignored with a warning.
    """

    name = normalize_method(method if method is not None else data.get("method"))
    run_kwargs: Dict[str, Any] = {}
    method_kwargs: Dict[str, Any] = {}
    method_keys = _METHOD_KEYS[name]
    for raw_key, raw_value in data.items():
        key = str(raw_key).strip().lower()
        if key == "method":
            continue
        if key in _RUN_KEYS:
            attr, conv = _RUN_KEYS[key]
            run_kwargs[attr] = _convert(key, raw_value, conv)
        elif key in method_keys:
            attr, conv = method_keys[key]
            method_kwargs[attr] = _convert(key, raw_value, conv)
        else:
            logger.warning("ignoring unrecognized configuration key %r for %s", raw_key, name)
    cls = _METHOD_TYPES[name]
    config: MethodConfig = cls(run=RunConfig(**run_kwargs), **method_kwargs)
    return config


def _read_json(path: Path) -> Any:
    try:
        text = Path(path).read_text()
    except FileNotFoundError:
        raise ConfigurationError(f"File {path} not found") from None
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Malformed JSON {path}: {exc}") from None


def load_config(path: Path) -> MethodConfig:
    """Read a JSON method configuration (must contain a ``method`` key)."""

    data = _read_json(path)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Malformed JSON {path}: expected an object")
    return parse_config(data)


def config_to_dict(config: MethodConfig) -> Dict[str, Any]:
    """Flatten a configuration back into the JSON key vocabulary."""

    out: Dict[str, Any] = {"method": config.method}
    for key, (attr, _) in _RUN_KEYS.items():
        out[key] = getattr(config.run, attr)
    for key, (attr, _) in _METHOD_KEYS[config.method].items():
        out[key] = getattr(config, attr)
    return out


@dataclass(frozen=True)
class RunDescription:
    """A run file: which configuration, which problem, which domain."""

    configuration: Path
    problem: str
    dimension: int
    range: float

    def __post_init__(self) -> None:
        _require(self.dimension > 0, f"dimension must be positive, got {self.dimension!r}")
        _require(self.range > 0, f"range must be positive, got {self.range!r}")


def load_run_description(path: Path) -> RunDescription:
    """Read a run file.

    ``dimension`` and ``range`` may be given as numbers or numeric strings.
    A relative ``configuration`` path is resolved against the run file's
    directory.
    """

    path = Path(path)
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Malformed JSON {path}: expected an object")
    missing = [k for k in ("configuration", "problem", "dimension", "range") if k not in data]
    if missing:
        raise ConfigurationError(f"run file {path} is missing keys: {', '.join(missing)}")
    conf_path = Path(str(data["configuration"]))
    if not conf_path.is_absolute():
        conf_path = path.parent / conf_path
    return RunDescription(
        configuration=conf_path,
        problem=str(data["problem"]).strip().lower(),
        dimension=_convert("dimension", data["dimension"], int),
        range=_convert("range", data["range"], float),
    )


__all__ = [
    "ConfigurationError",
    "DEFAULT_HOOKE_JEEVES",
    "DEFAULT_NELDER_MEAD",
    "DEFAULT_RUN",
    "HookeJeevesConfig",
    "METHODS",
    "MethodConfig",
    "NelderMeadConfig",
    "RunConfig",
    "RunDescription",
    "config_to_dict",
    "load_config",
    "load_run_description",
    "normalize_method",
    "parse_config",
]
