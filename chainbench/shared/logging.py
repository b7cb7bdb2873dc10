import logging
import sys
from typing import Optional

from chainbench.const import LOG_DATE_FORMAT, LOG_FORMAT, LOG_HANDLER_NAME
from .config import Config


class LoggingManager:
    """Manager for logging setup."""

    @classmethod
    def setup_logging(cls, config: Optional[Config] = None) -> logging.Handler:
        """Route benchmark logs to stderr, keeping stdout for the reports.

        Calling it again replaces the handler it installed before, so log
        lines are never duplicated.

        Args:
            config: Settings carrying ``log_level`` and ``library_log_levels``.
                Built from the environment when omitted.

        Returns:
            The console handler attached to the root logger.
        """
        config = config or Config()
        numeric_level = cls.resolve_level(config.log_level, logging.INFO)

        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        # Setup console handler
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.set_name(LOG_HANDLER_NAME)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(numeric_level)

        # Configure root logger
        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            if handler.get_name() == LOG_HANDLER_NAME:
                root_logger.removeHandler(handler)
                handler.close()
        root_logger.setLevel(numeric_level)
        root_logger.addHandler(console_handler)

        # urllib3 logs every connection at DEBUG, which drowns the progress lines
        for logger_name, library_level in config.library_log_levels.items():
            logging.getLogger(logger_name).setLevel(cls.resolve_level(library_level, logging.WARNING))

        return console_handler

    @staticmethod
    def resolve_level(name: str, default: int) -> int:
        level = logging.getLevelName(name.upper())
        return level if isinstance(level, int) else default
