"""Plotter configuration loading and validation."""

from pathplot.configs.loader import (
    OPTION_NAMES,
    ConfigError,
    DeviceConfig,
    LoggingConfig,
    OptionBound,
    OptionsConfig,
    OutputConfig,
    PlotterConfig,
    SamplingConfig,
    default_config_path,
    load_config,
)

__all__ = [
    "OPTION_NAMES",
    "ConfigError",
    "DeviceConfig",
    "LoggingConfig",
    "OptionBound",
    "OptionsConfig",
    "OutputConfig",
    "PlotterConfig",
    "SamplingConfig",
    "default_config_path",
    "load_config",
]
