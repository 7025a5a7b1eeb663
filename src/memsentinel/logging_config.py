"""
Logging configuration for processes embedding the monitor.

``setup_logging`` configures:
- Console output (warnings only in user-friendly mode)
- File output to logs/{service_name}.log when a service name is given
- Fresh log file on each start unless MEMSENTINEL_LOG_APPEND is set
"""

import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import Optional, Union

from memsentinel.config import env_bool, env_str

_config_lock = threading.Lock()
_MODULE_LOGGER = logging.getLogger(__name__)
_TECHNICAL_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_NOISY_LOGGERS = ("asyncio", "aiohttp", "aiohttp.access", "aiohttp.client", "urllib3")


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as exc:
            _MODULE_LOGGER.debug("Handler close failed: %s", exc)
    logger.handlers = []


def _build_console_handler(user_friendly: bool) -> logging.Handler:
    if user_friendly:
        formatter = logging.Formatter("%(message)s")
    else:
        formatter = logging.Formatter(_TECHNICAL_FORMAT, _DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING if user_friendly else logging.DEBUG)
    return console_handler


def _resolve_log_dir(log_dir: Union[str, Path, None]) -> Path:
    if log_dir is not None:
        return Path(log_dir).expanduser()
    configured = env_str("MEMSENTINEL_LOG_DIR")
    return Path(configured).expanduser() if configured else Path.cwd() / "logs"


def _configure_file_handler(service_name: Optional[str], log_dir: Union[str, Path, None]) -> Optional[logging.Handler]:
    if not service_name:
        return None

    logs_dir = _resolve_log_dir(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    file_mode = "a" if env_bool("MEMSENTINEL_LOG_APPEND", or_value=False) else "w"

    file_handler = logging.handlers.WatchedFileHandler(logs_dir / f"{service_name}.log", mode=file_mode)
    file_handler.setFormatter(logging.Formatter(_TECHNICAL_FORMAT, _DATE_FORMAT))
    file_handler.setLevel(logging.INFO)
    return file_handler


def _suppress_noisy_third_parties() -> None:
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(
    service_name: Optional[str] = None,
    user_friendly: bool = False,
    *,
    log_dir: Union[str, Path, None] = None,
    level: int = logging.INFO,
) -> None:
    """Configure the root logger with a console handler and an optional file handler."""
    with _config_lock:
        root_logger = logging.getLogger()
        _close_handlers(root_logger)

        root_logger.addHandler(_build_console_handler(user_friendly))
        file_handler = _configure_file_handler(service_name, log_dir)
        if file_handler:
            root_logger.addHandler(file_handler)

        root_logger.setLevel(level)
        _suppress_noisy_third_parties()


__all__ = ["setup_logging"]
