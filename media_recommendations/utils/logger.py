import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import IO, Optional, Union


DEFAULT_LOGGER_NAME = "get-media-recommendations"
# Parent of every module logger in the package (`logging.getLogger(__name__)`).
PACKAGE_LOGGER_NAME = "media_recommendations"

_CONFIGURED_LOGGERS: set[str] = set()


def _json_enabled() -> bool:
    return os.getenv("LOG_JSON", "1") not in ("0", "false", "False")


def get_logger(
    name: Optional[str] = None,
    *,
    level: Union[int, str, None] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Return a configured logger that logs to stdout at INFO by default.

    Respects env var LOG_LEVEL (default INFO) and LOG_FORMAT; an explicit
    `level` wins over the environment.
    Idempotent per logger name unless a level or stream is passed in.
    """
    logger_name = name or DEFAULT_LOGGER_NAME
    logger = logging.getLogger(logger_name)

    if logger_name in _CONFIGURED_LOGGERS and level is None and stream is None:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    if _json_enabled():
        # Add the desired level prefix, but keep JSON body clean
        fmt = os.getenv("LOG_FORMAT") or "%(levelname)s:     %(message)s"
    else:
        fmt = os.getenv("LOG_FORMAT") or "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    handler.setFormatter(logging.Formatter(fmt))

    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED_LOGGERS.add(logger_name)
    return logger


class Logger:
    """Light wrapper that supports structured JSON logs.

    Env:
      - LOG_LEVEL (default INFO)
      - LOG_JSON=1 enables JSON lines
    """

    def __init__(
        self,
        name: Optional[str] = None,
        *,
        level: Union[int, str, None] = None,
        stream: Optional[IO[str]] = None,
    ):
        self._name = name or DEFAULT_LOGGER_NAME
        self._log = get_logger(self._name, level=level, stream=stream)
        get_logger(PACKAGE_LOGGER_NAME, level=level, stream=stream)
        self._json = _json_enabled()

    def _emit(self, level: str, msg: str, **kv):
        lvl = getattr(logging, level.upper(), logging.INFO)
        if not self._log.isEnabledFor(lvl):
            return
        if self._json:
            payload = {
                "ts": datetime.now(timezone.utc).isoformat(),
                "event": msg,
            }
            if kv:
                payload.update(kv)
            self._log.log(lvl, json.dumps(payload, ensure_ascii=False, default=str))
        else:
            if kv:
                kv_str = " ".join(f"{k}={v}" for k, v in kv.items())
                self._log.log(lvl, f"{msg} | {kv_str}")
            else:
                self._log.log(lvl, msg)

    def info(self, msg: str, **kv):
        self._emit("INFO", msg, **kv)

    def error(self, msg: str, **kv):
        self._emit("ERROR", msg, **kv)

    def debug(self, msg: str, **kv):
        self._emit("DEBUG", msg, **kv)
