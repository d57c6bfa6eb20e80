import os
import logging
import sys
from logging.handlers import RotatingFileHandler

from clusterwatch.core.config import LogConfig

class LoggerSetup:
    """
    Centralized logging configuration for clusterwatch.
    Provides consistent logging across all modules with both console and file output.
    """
    _initialized = False
    _logs_dir = 'logs'
    _console_level = logging.INFO
    _max_bytes = 10 * 1024 * 1024
    _backup_count = 5

    @classmethod
    def configure(cls, config: LogConfig) -> None:
        """
        Apply logging configuration for loggers created afterwards.

        Args:
            config: Logging configuration (level, directory, rotation)
        """
        if config.directory:
            cls._logs_dir = config.directory
        cls._console_level = getattr(logging, config.level.upper())
        cls._max_bytes = config.max_size
        cls._backup_count = config.backup_count

    @classmethod
    def _get_log_path(cls, name: str) -> str:
        """
        Generate a log file path based on the name.

        Args:
            name: Name to create log file for (module path or class name)
        Returns:
            str: Path for the log file
        """
        if '.' in name:
            # For module paths, use the last part
            filename = f"{name.split('.')[-1]}.log"
        else:
            filename = f"{name}.log"

        return os.path.join(cls._logs_dir, filename)

    @classmethod
    def setup(cls, name: str) -> logging.Logger:
        """
        Set up and return a logger.
        Automatically handles both module paths and class names.

        Args:
            name: Logger name (__name__ for modules or __class__.__name__ for classes)
        Returns:
            logging.Logger: Configured logger instance
        Example:
            logger = LoggerSetup.setup(__class__.__name__)
            # Creates ClusterPoller.log
        """
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)

        # Avoid adding handlers multiple times
        if not logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(cls._console_level)
            console_formatter = logging.Formatter(
                '%(asctime)s - %(levelname)s - %(message)s'
            )
            console_handler.setFormatter(console_formatter)
            logger.addHandler(console_handler)

            # Only add file handler if not in test environment
            if "pytest" not in sys.modules:
                try:
                    debug_log_file = cls._get_log_path(name)
                    os.makedirs(os.path.dirname(debug_log_file) or '.', exist_ok=True)

                    file_handler = RotatingFileHandler(
                        debug_log_file,
                        maxBytes=cls._max_bytes,
                        backupCount=cls._backup_count,
                        encoding='utf-8'
                    )
                    file_handler.setLevel(logging.DEBUG)
                    file_formatter = logging.Formatter(
                        '%(asctime)s - %(levelname)s - [%(name)s] - %(message)s'
                    )
                    file_handler.setFormatter(file_formatter)
                    logger.addHandler(file_handler)
                except (PermissionError, OSError) as e:
                    # Log to console if file logging fails
                    console_handler.setLevel(logging.DEBUG)
                    logger.warning(f"Could not set up file logging: {str(e)}")

        if not cls._initialized:
            # Quiet noisy loggers
            logging.getLogger('aiohttp').setLevel(logging.WARNING)
            logging.getLogger('asyncio').setLevel(logging.WARNING)
            cls._initialized = True

        return logger
