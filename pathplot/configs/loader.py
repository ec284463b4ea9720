"""Configuration loader for pathplot.

Loads and validates ``plotter.yaml`` into typed, frozen dataclasses.
Device resolution, option bounds and sampling defaults come from the
config -- nothing device-specific is hardcoded in the pipeline.

Usage::

    from pathplot.configs.loader import load_config
    cfg = load_config()                       # default path
    cfg = load_config("/custom/plotter.yaml") # explicit path
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from pathplot.utils.fs import load_yaml

logger = logging.getLogger(__name__)

OPTION_NAMES = (
    "pen_down_speed",
    "pen_up_speed",
    "acceleration",
    "pen_lower_rate",
    "pen_raise_rate",
)
"""Numeric plot options, in command-line flag order."""

DRIVER_LIMITS = {
    "pen_down_speed": (1, 110),
    "pen_up_speed": (1, 110),
    "acceleration": (1, 100),
    "pen_lower_rate": (1, 100),
    "pen_raise_rate": (1, 100),
}
"""Inclusive range the axicli driver accepts for each numeric option."""


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DeviceConfig:
    """Plotter identity and motor resolution."""

    name: str
    cli: str
    units: str
    steps_per_unit: float

    @property
    def min_step(self) -> float:
        """Smallest addressable move, in document units."""
        return 1.0 / self.steps_per_unit


@dataclass(frozen=True)
class SamplingConfig:
    """Polyline approximation settings (document units)."""

    default_resolution: float
    fallback_resolution: float
    dedupe_tolerance: float


@dataclass(frozen=True)
class OptionBound:
    """Inclusive integer range and default for one plot option."""

    minimum: int
    maximum: int
    default: int

    def clamp(self, value: int) -> int:
        return max(self.minimum, min(self.maximum, value))


@dataclass(frozen=True)
class OptionsConfig:
    """Bounds and defaults for the driver options."""

    pen_down_speed: OptionBound
    pen_up_speed: OptionBound
    acceleration: OptionBound
    pen_lower_rate: OptionBound
    pen_raise_rate: OptionBound
    constant_speed: bool = False
    reorder: bool = False

    def bound(self, name: str) -> OptionBound:
        """Return the bound for option *name* or raise ``ConfigError``."""
        if name not in OPTION_NAMES:
            raise ConfigError(
                f"Unknown option '{name}'. Available: {list(OPTION_NAMES)}"
            )
        return getattr(self, name)


@dataclass(frozen=True)
class OutputConfig:
    """Where the CLI writes documents and how it names them."""

    directory: str
    timestamp_format: str


@dataclass(frozen=True)
class LoggingConfig:
    """Default logging setup for the CLI."""

    level: str = "INFO"
    json: bool = False


@dataclass(frozen=True)
class PlotterConfig:
    """Complete configuration loaded from ``plotter.yaml``."""

    device: DeviceConfig
    sampling: SamplingConfig
    options: OptionsConfig
    output: OutputConfig
    logging: LoggingConfig


# ---------------------------------------------------------------------------
# Internal parsing helpers
# ---------------------------------------------------------------------------


def _parse_bound(name: str, data: Any) -> OptionBound:
    """Parse one ``{min, max, default}`` option section."""
    if not isinstance(data, dict):
        raise ConfigError(
            f"Option '{name}' must be a mapping with min/max/default, got {data!r}"
        )
    return OptionBound(
        minimum=int(data["min"]),
        maximum=int(data["max"]),
        default=int(data["default"]),
    )


def _parse_options(data: dict[str, Any]) -> OptionsConfig:
    """Parse the ``options`` section."""
    bounds = {name: _parse_bound(name, data[name]) for name in OPTION_NAMES}
    return OptionsConfig(
        **bounds,
        constant_speed=bool(data.get("constant_speed", False)),
        reorder=bool(data.get("reorder", False)),
    )


def _validate_config(cfg: PlotterConfig) -> None:
    """Cross-field checks that dataclass typing cannot express."""
    if cfg.device.steps_per_unit <= 0:
        raise ConfigError(
            f"steps_per_unit must be > 0, got {cfg.device.steps_per_unit}"
        )
    if not cfg.device.cli.strip():
        raise ConfigError("device.cli must not be empty")

    s = cfg.sampling
    if s.fallback_resolution <= cfg.device.min_step:
        raise ConfigError(
            f"fallback_resolution ({s.fallback_resolution}) must be greater "
            f"than the device step ({cfg.device.min_step:.6g})"
        )
    if s.default_resolution <= cfg.device.min_step:
        raise ConfigError(
            f"default_resolution ({s.default_resolution}) must be greater "
            f"than the device step ({cfg.device.min_step:.6g})"
        )
    if s.dedupe_tolerance < 0:
        raise ConfigError(
            f"dedupe_tolerance must be >= 0, got {s.dedupe_tolerance}"
        )

    for name in OPTION_NAMES:
        b = cfg.options.bound(name)
        if b.minimum > b.maximum:
            raise ConfigError(
                f"Option '{name}' min ({b.minimum}) exceeds max ({b.maximum})"
            )
        lo, hi = DRIVER_LIMITS[name]
        if b.minimum < lo or b.maximum > hi:
            raise ConfigError(
                f"Option '{name}' range [{b.minimum}, {b.maximum}] exceeds "
                f"the driver limits [{lo}, {hi}]"
            )
        if not b.minimum <= b.default <= b.maximum:
            raise ConfigError(
                f"Option '{name}' default ({b.default}) outside "
                f"[{b.minimum}, {b.maximum}]"
            )

    level = cfg.logging.level.upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigError(f"Unknown logging level '{cfg.logging.level}'")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def default_config_path() -> Path:
    """Path of the ``plotter.yaml`` shipped with the package."""
    return Path(__file__).parent / "plotter.yaml"


def load_config(path: str | Path | None = None) -> PlotterConfig:
    """Load and validate plotter configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``plotter.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    PlotterConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    path = default_config_path() if path is None else Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    try:
        data: dict[str, Any] = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Configuration is not valid YAML: {exc}") from exc
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")

    try:
        # -- device ---------------------------------------------------------
        dd = data["device"]
        device = DeviceConfig(
            name=str(dd["name"]),
            cli=str(dd["cli"]),
            units=str(dd.get("units", "inch")),
            steps_per_unit=float(dd["steps_per_unit"]),
        )

        # -- sampling -------------------------------------------------------
        sd = data["sampling"]
        sampling = SamplingConfig(
            default_resolution=float(sd["default_resolution"]),
            fallback_resolution=float(sd["fallback_resolution"]),
            dedupe_tolerance=float(sd["dedupe_tolerance"]),
        )

        # -- options --------------------------------------------------------
        options = _parse_options(data["options"])

        # -- output ---------------------------------------------------------
        od = data.get("output", {})
        output = OutputConfig(
            directory=str(od.get("directory", ".")),
            timestamp_format=str(od.get("timestamp_format", "%Y-%m-%d-%I-%M-%S")),
        )

        # -- logging (optional) ---------------------------------------------
        ld = data.get("logging", {}) or {}
        logging_cfg = LoggingConfig(
            level=str(ld.get("level", "INFO")),
            json=bool(ld.get("json", False)),
        )

        config = PlotterConfig(
            device=device,
            sampling=sampling,
            options=options,
            output=output,
            logging=logging_cfg,
        )

        _validate_config(config)
        logger.info("Configuration loaded successfully")
        return config

    except KeyError as exc:
        raise ConfigError(
            f"Missing required configuration key: {exc}"
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc
