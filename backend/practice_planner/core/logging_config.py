"""
Logging setup for the practice planner.

Every module logs through the standard ``logging`` package and attaches
structured data as ``extra={"context": {...}}``. ``setup_logging`` decides
how those records are rendered:

- ``JSONFormatter`` for production and log files
- ``ConsoleFormatter`` (colored) for local development
- per-request access lines tagged with a request id
- optional per-statement SQL timing (SQL_ECHO)

Usage:
    from practice_planner.core.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Sets reordered", extra={"context": {"practice_id": pid}})
"""

import json
import logging
import logging.handlers
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from flask import Flask, g, request
from sqlalchemy import event
from sqlalchemy.engine import Engine

LOG_DIR = Path(__file__).resolve().parents[2] / "logs"
REQUEST_ID_HEADER = "X-Request-ID"
_MAX_LOG_BYTES = 10 * 1024 * 1024


class JSONFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        context = getattr(record, "context", None)
        if context is not None:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colors the level name; the record itself is not modified."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        colored = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, "")
        colored.levelname = f"{color}{record.levelname:8}{self.RESET}"
        return super().format(colored)


def _resolve_level(log_level: Union[int, str]) -> int:
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def setup_logging(
    app: Optional[Flask] = None,
    log_level: Union[int, str] = "INFO",
    enable_sql_echo: bool = False,
    log_to_file: bool = False,
    use_json_format: bool = False,
) -> None:
    """
    Replace the root handlers with the planner's own.

    Args:
        app: Flask app to attach request logging to, if any
        log_level: ``logging.INFO`` or a level name such as ``"DEBUG"``
        enable_sql_echo: Log each SQL statement with its duration
        log_to_file: Also write JSON logs to rotating files under ``logs/``
        use_json_format: Render console output as JSON
    """
    level = _resolve_level(log_level)
    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    if use_json_format:
        console.setFormatter(JSONFormatter())
    else:
        console.setFormatter(
            ConsoleFormatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root.addHandler(console)

    if log_to_file:
        _add_file_handlers(root, level)
    if enable_sql_echo:
        _enable_statement_timing()
    if app is not None:
        _register_request_logging(app)

    for noisy in ("werkzeug", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger("practice_planner").info(
        "Logging configured",
        extra={
            "context": {
                "level": logging.getLevelName(level),
                "sql_echo": enable_sql_echo,
                "log_to_file": log_to_file,
                "json": use_json_format,
            }
        },
    )


def _rotating_handler(filename: str, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        LOG_DIR / filename, maxBytes=_MAX_LOG_BYTES, backupCount=5, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def _add_file_handlers(root: logging.Logger, level: int) -> None:
    try:
        LOG_DIR.mkdir(exist_ok=True)
        root.addHandler(_rotating_handler("practice_planner.log", level))
        root.addHandler(_rotating_handler("practice_planner_errors.log", logging.ERROR))
    except OSError as exc:
        # Read-only or full disk: console logging still works
        logging.getLogger("practice_planner.logging").warning(
            "File logging disabled",
            extra={"context": {"log_dir": str(LOG_DIR), "error": str(exc)}},
        )


_statement_timing_enabled = False


def _enable_statement_timing() -> None:
    global _statement_timing_enabled
    if _statement_timing_enabled:
        return
    sql_logger = logging.getLogger("practice_planner.sql")

    @event.listens_for(Engine, "before_cursor_execute")
    def _before(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("echo_started", []).append(time.perf_counter())

    @event.listens_for(Engine, "after_cursor_execute")
    def _after(conn, cursor, statement, parameters, context, executemany):
        started = conn.info.get("echo_started")
        if not started:
            return
        duration_ms = (time.perf_counter() - started.pop()) * 1000
        sql_logger.info(
            f"SQL {duration_ms:.2f}ms",
            extra={
                "context": {
                    "statement": statement[:500],
                    "duration_ms": round(duration_ms, 2),
                    "executemany": executemany,
                }
            },
        )

    _statement_timing_enabled = True


def _register_request_logging(app: Flask) -> None:
    access_logger = logging.getLogger("practice_planner.http")

    @app.before_request
    def _start_request():
        g.request_started = time.perf_counter()
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        g.route = request.url_rule.rule if request.url_rule is not None else request.path

    @app.after_request
    def _finish_request(response):
        started = g.get("request_started")
        if started is None:
            return response
        duration_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = g.request_id
        access_logger.info(
            f"{request.method} {g.route} {response.status_code}",
            extra={
                "context": {
                    "request_id": g.request_id,
                    "method": request.method,
                    "path": request.path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                }
            },
        )
        return response


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_performance(func_name: str, duration_ms: float, **kwargs) -> None:
    """
    Log how long an operation took.

    Args:
        func_name: Operation name, e.g. ``"attendance.upsert_batch"``
        duration_ms: Elapsed wall time in milliseconds
        **kwargs: Extra context such as practice_id or row_count
    """
    context = {"operation": func_name, "duration_ms": round(duration_ms, 2)}
    context.update(kwargs)
    get_logger("practice_planner.performance").info(
        f"{func_name} took {duration_ms:.2f}ms", extra={"context": context}
    )
