"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Job file validation (validators)
    - Atomic I/O and YAML loading (fs)
    - Unified logging (logging_config)

Only ``validators`` reaches into ``pathplot.geometry`` (to build curves);
nothing here imports the pipeline or the CLI.

Convenience imports:
    from pathplot.utils import fs, validators
    from pathplot.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import logging_config
from . import validators

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'fs',
    'logging_config',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]
