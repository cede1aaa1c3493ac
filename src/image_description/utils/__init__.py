"""
Utility functions for logging, image handling and model downloads
"""

from image_description.utils.logger_config import (
    configure_logger,
    reset_logger,
    is_file_logging_enabled,
)
from image_description.utils.model_downloader import ensure_model_downloaded, get_project_root

__all__ = [
    "configure_logger",
    "reset_logger",
    "is_file_logging_enabled",
    "ensure_model_downloaded",
    "get_project_root",
]
