"""
This module provides logging functionality for the PCA9685 driver.
"""

import logging
import os
from pathlib import Path

from pca9685_driver.singleton import Singleton

PCA9685 = 'PCA9685'
LOG_DIR_ENV = 'PCA9685_LOG_DIR'


class Logger(metaclass=Singleton):
    """A singleton logger class for setting up logging handlers."""

    def __init__(self):
        """Initialize the logger with file and stream handlers.

        The file handler is only attached when ``PCA9685_LOG_DIR`` names a
        folder; otherwise records go to a ``NullHandler`` and the application
        decides where driver logs end up.
        """
        logs_folder = os.environ.get(LOG_DIR_ENV)
        if logs_folder:
            Path(logs_folder).mkdir(parents=True, exist_ok=True)
            # file handler keeps the full bus history, console only on request
            self.logging_file_handler = logging.FileHandler(Path(logs_folder) / (PCA9685 + '.log'), delay=True)
        else:
            self.logging_file_handler = logging.NullHandler()
        self.logging_stream_handler = logging.StreamHandler()

        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        self.logging_file_handler.setFormatter(formatter)
        self.logging_stream_handler.setFormatter(formatter)

    def setup_logger(self, logger_name=None, enable_stream_handler=False, level=logging.INFO):
        """Set up a logger with the given name and return it.

        Args:
            logger_name (str, optional): Name of the component. Defaults to None.
            enable_stream_handler (bool): Whether to add the stream handler for console output.
            level (int): Logging level of the returned logger.

        Returns:
            logging.Logger: The configured logger.
        """
        if not logger_name:
            logger_name = PCA9685
        else:
            logger_name = PCA9685 + ' ' + logger_name

        logger = logging.getLogger(f"{logger_name:<24}")

        logger.setLevel(level)

        if self.logging_file_handler not in logger.handlers:
            logger.addHandler(self.logging_file_handler)
        if enable_stream_handler and self.logging_stream_handler not in logger.handlers:
            logger.addHandler(self.logging_stream_handler)

        return logger
