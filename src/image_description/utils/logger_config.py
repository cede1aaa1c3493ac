"""
Loguru configuration for image description

Provides centralized logger configuration with:
- File logging to logs/ directory (when IMAGE_DESCRIPTION_LOG_MODE=file)
- Console output
- Automatic log rotation
- Default INFO level

Log Mode Control:
    Set environment variable IMAGE_DESCRIPTION_LOG_MODE to control file logging:
    - IMAGE_DESCRIPTION_LOG_MODE=file: Enable file logging
    - IMAGE_DESCRIPTION_LOG_MODE=none or not set: Console only (default)
"""

import os
import sys
from pathlib import Path
from typing import Optional, List
from loguru import logger


LOG_MODE_ENV = "IMAGE_DESCRIPTION_LOG_MODE"
LOG_MODE_FILE = "file"
LOG_MODE_NONE = "none"

# Configuration only happens once unless reset
_configured = False


def is_file_logging_enabled() -> bool:
    """
    Check if file logging is enabled via environment variable.

    Returns:
        True if IMAGE_DESCRIPTION_LOG_MODE=file, False otherwise
    """
    return os.environ.get(LOG_MODE_ENV, "").lower() == LOG_MODE_FILE


def make_component_filter(min_level_name: str, debug_components: List[str]):
    """
    Create a filter that lets DEBUG through for selected components only.

    Components are identified by the 'component' field in record extra,
    set via logger.bind(component=<name>). Matching is by prefix, so
    "openai" matches "openai-vlm-remote".

    Args:
        min_level_name: Minimum level for all other components (e.g., "INFO")
        debug_components: Component name prefixes allowed to log DEBUG

    Returns:
        Filter function for a loguru handler
    """
    def component_filter(record) -> bool:
        component_name = record["extra"].get("component") or ""
        if any(component_name.startswith(prefix) for prefix in debug_components):
            return True

        if debug_components:
            # Handler level is DEBUG, so enforce the real minimum here
            return record["level"].no >= logger.level(min_level_name).no

        return True

    return component_filter


def configure_logger(
    log_dir: str = "logs",
    level: str = "INFO",
    rotation: str = "100 MB",
    retention: str = "30 days",
    console_level: Optional[str] = None,
    file_level: Optional[str] = None,
    debug_components: Optional[List[str]] = None,
) -> None:
    """
    Configure loguru logger with console and optional file outputs.

    Args:
        log_dir: Directory for log files (default: "logs")
        level: Default log level (default: "INFO")
        rotation: When to rotate log files (default: "100 MB")
        retention: How long to keep log files (default: "30 days")
        console_level: Console log level (default: same as level)
        file_level: File log level (default: same as level)
        debug_components: Component names to enable DEBUG output for
                         (e.g., ["ImageLoader", "florence2"])

    Example:
        >>> from image_description.utils.logger_config import configure_logger
        >>> configure_logger(level="DEBUG")
        >>> configure_logger(level="INFO", debug_components=["ImageLoader"])
    """
    global _configured

    if _configured:
        logger.warning("Logger already configured, skipping reconfiguration")
        return

    logger.remove()
    logger.configure(extra={"component": "-"})

    console_level = console_level or level
    file_level = file_level or level
    debug_components = debug_components or []

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
               "<level>{level: <8}</level> | "
               "<yellow>[{extra[component]}]</yellow> | "
               "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
               "<level>{message}</level>",
        level="DEBUG" if debug_components else console_level,
        filter=make_component_filter(console_level, debug_components),
        colorize=True,
    )

    file_logging_enabled = is_file_logging_enabled()
    if file_logging_enabled:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        log_file = log_path / "image_description_{time:YYYY-MM-DD}.log"
        logger.add(
            str(log_file),
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | [{extra[component]}] | {name}:{function}:{line} | {message}",
            level="DEBUG" if debug_components else file_level,
            filter=make_component_filter(file_level, debug_components),
            rotation=rotation,
            retention=retention,
            compression="zip",
            encoding="utf-8",
        )

    _configured = True

    debug_info = f" (DEBUG components: {', '.join(debug_components)})" if debug_components else ""
    file_info = f", file={file_level}, log_dir={log_dir}" if file_logging_enabled else " (file logging disabled)"
    logger.info(f"Logger configured: console={console_level}{file_info}{debug_info}")


def reset_logger() -> None:
    """
    Reset logger configuration flag.

    Allows configure_logger() to run again. Useful for tests and for the CLI,
    which reconfigures the level from its flags.
    """
    global _configured
    _configured = False
    logger.remove()


def is_configured() -> bool:
    return _configured


def auto_configure():
    """Auto-configure logger on import with default settings."""
    # Tests install their own sinks (caplog, capsys)
    if "pytest" in sys.modules:
        return

    if not _configured:
        try:
            configure_logger()
        except Exception as e:
            # Keep loguru's default stderr sink if our sinks cannot be installed
            print(f"Warning: Failed to configure logger: {e}", file=sys.stderr)


auto_configure()
