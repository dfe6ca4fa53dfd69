"""Inflector structured logging module.

Every inflector module logs through a structlog logger bound to its own
component name::

    logger = get_module_logger()
    logger.info("inflection_registry_built", locale="en", kind_count=2)

Events are snake_case names with keyword context. Output is JSON in
production and coloured console lines elsewhere; under pytest nothing is
emitted.
"""

import inspect
import logging
import sys
from typing import List, Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.typing import Processor

from .config import settings

SILENT_LEVEL = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    """Detect if running in a test environment."""
    return "pytest" in sys.modules


def _build_processors(json_output: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Overrides settings.LOG_LEVEL.
        is_production: Overrides settings.is_production (JSON vs console).

    Returns:
        Configured logger instance.
    """
    if _is_test_environment():
        processors: List[Processor] = [
            structlog.stdlib.add_log_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ]
        level = SILENT_LEVEL
    else:
        json_output = settings.is_production if is_production is None else is_production
        processors = _build_processors(json_output)
        level_name = (log_level or settings.LOG_LEVEL).upper()
        level = getattr(logging, level_name, logging.INFO)

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=level, force=True)
    logging.root.setLevel(level)

    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def get_module_logger() -> BoundLogger:
    """Return the shared logger bound to the calling module.

    Example:
        # In inflector/registry.py
        logger = get_module_logger()
        # context: {"component": "registry", "module_path": "inflector.registry"}
    """
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    module = inspect.getmodule(caller) if caller is not None else None
    if module is None:
        return logger.bind(component="unknown")

    module_path = module.__name__
    return logger.bind(component=module_path.rsplit(".", 1)[-1], module_path=module_path)
