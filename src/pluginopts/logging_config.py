import sys
import os
from pathlib import Path
from loguru import logger

# Flag to track if logging has been configured
_logging_configured = False

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def setup_logging(level=None, suppress_console=None, enable_file_logging=None, force=False):
    """
    Configures the global logger.

    Console logging goes to stderr so generated output on stdout stays clean.
    File logging is opt-in via PLUGINOPTS_FILE_LOGGING=1 or enable_file_logging=True.

    Args:
        level: Logging level. If None, PLUGINOPTS_LOG_LEVEL or INFO.
        suppress_console: If True, suppress console logging. If None, check PLUGINOPTS_MACHINE_MODE.
        enable_file_logging: If True, enable file logging. If None, check PLUGINOPTS_FILE_LOGGING.
        force: Reconfigure even if logging was already set up (used by --verbose).
    """
    global _logging_configured

    if _logging_configured and not force:
        return
    _logging_configured = True

    logger.remove()

    if level is None:
        level = os.getenv("PLUGINOPTS_LOG_LEVEL", "INFO").upper()

    if suppress_console is None:
        suppress_console = _env_flag("PLUGINOPTS_MACHINE_MODE")

    if not suppress_console:
        logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=True)

    if enable_file_logging is None:
        enable_file_logging = _env_flag("PLUGINOPTS_FILE_LOGGING")

    if enable_file_logging:
        log_dir = Path.cwd() / ".pluginopts" / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "pluginopts.log",
            level="INFO",
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            catch=True,
            serialize=False,
        )


# Configure the logger on import (will check env var for machine mode)
setup_logging()
