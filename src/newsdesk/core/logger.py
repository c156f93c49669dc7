import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


class Colors:
    """ANSI коды для цветного вывода в консоли."""

    RESET = "\033[0m"
    BOLD = "\033[1m"

    CYAN = "\033[96m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"


class ColoredFormatter(logging.Formatter):
    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def __init__(self, fmt: str, datefmt: str | None = None, use_color: bool = True):
        super().__init__(fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)

        levelname_original = record.levelname
        color = self.LEVEL_COLORS.get(record.levelno, "")
        record.levelname = f"{color}{record.levelname}{Colors.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname_original


class NewsdeskLogger:
    CONSOLE_FORMAT = "%(levelname)s\t%(asctime)s - %(name)s - %(message)s"
    FILE_FORMAT = (
        "%(levelname)-8s "
        "%(asctime)s - "
        "%(name)s - "
        "%(funcName)s:%(lineno)d - "
        "%(message)s"
    )
    DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    def __init__(
        self,
        name: str,
        level: int = logging.INFO,
        log_dir: str | Path = "logs",
        log_file: Optional[str] = None,
        max_bytes: int = 10 * 1024 * 1024,  # 10 MB
        backup_count: int = 5,
        console_output: bool = True,
        file_output: bool = True,
    ):
        self.name = name
        self.level = level
        self.log_dir = Path(log_dir)
        self.log_file = log_file or "newsdesk.log"
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.console_output = console_output
        self.file_output = file_output

        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.handlers.clear()

        self._setup_handlers()

    def _setup_handlers(self) -> None:
        if self.console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self.level)
            console_handler.setFormatter(
                ColoredFormatter(self.CONSOLE_FORMAT, self.DATE_FORMAT, use_color=True)
            )
            self._logger.addHandler(console_handler)

        if self.file_output:
            self.log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                self.log_dir / self.log_file,
                maxBytes=self.max_bytes,
                backupCount=self.backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(self.level)
            file_handler.setFormatter(
                ColoredFormatter(self.FILE_FORMAT, self.DATE_FORMAT, use_color=False)
            )
            self._logger.addHandler(file_handler)

    def debug(self, message: str, *args, **kwargs) -> None:
        self._logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        self._logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        self._logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        self._logger.error(message, *args, **kwargs)

    def critical(self, message: str, *args, **kwargs) -> None:
        self._logger.critical(message, *args, **kwargs)

    def exception(self, message: str, *args, **kwargs) -> None:
        kwargs.setdefault("exc_info", True)
        self._logger.error(message, *args, **kwargs)

    warn = warning

    def set_level(self, level: int | str) -> None:
        if isinstance(level, str):
            level = getattr(logging, level.upper())

        self._logger.setLevel(level)
        for handler in self._logger.handlers:
            handler.setLevel(level)

    def get_level(self) -> int:
        return self._logger.level

    @property
    def logger(self) -> logging.Logger:
        return self._logger


_loggers: dict[str, NewsdeskLogger] = {}


def _resolve_level(level: Optional[int | str]) -> int:
    if level is None:
        from newsdesk.core.config import config

        level = config.log_level

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    return level


def get_logger(
    name: str,
    level: Optional[int | str] = None,
    **kwargs,
) -> NewsdeskLogger:
    if name in _loggers:
        return _loggers[name]

    if "log_dir" not in kwargs or "log_file" not in kwargs:
        from newsdesk.core.config import config

        kwargs.setdefault("log_dir", config.log_dir)
        kwargs.setdefault("log_file", config.log_file)

    logger = NewsdeskLogger(name, level=_resolve_level(level), **kwargs)
    _loggers[name] = logger

    return logger


def configure_root_logger(
    level: Optional[int | str] = None,
    log_dir: str | Path | None = None,
    log_file: str | None = None,
) -> NewsdeskLogger:
    from newsdesk.core.config import config

    resolved = _resolve_level(level)
    root_logger = get_logger(
        "newsdesk",
        level=resolved,
        log_dir=log_dir or config.log_dir,
        log_file=log_file or config.log_file,
    )

    logging.root.setLevel(resolved)
    return root_logger
