"""
Logging utilities for the onboarding engine.
"""
import os
import logging


def setup_logging(log_file_path: str, level: str = "INFO") -> str:
    """
    Set up logging to file with minimal console output.

    Args:
        log_file_path: Full path to the log file
        level: Level name for the file handler (DEBUG, INFO, ...)

    Returns:
        Path to the log file
    """
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    # Clear any existing handlers
    logging.getLogger().handlers.clear()

    file_handler = logging.FileHandler(log_file_path, mode='w')
    file_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    file_formatter = logging.Formatter('%(asctime)s %(levelname)s %(name)s - %(message)s')
    file_handler.setFormatter(file_formatter)

    # Console only shows critical messages; the user sees print() output instead
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.CRITICAL)
    console_handler.setFormatter(logging.Formatter('%(message)s'))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    return log_file_path
