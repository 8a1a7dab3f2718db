"""
Slow query reporting for the planner's engines.

A query slower than ALERT_QUERY_MS_THRESHOLD is logged as a warning on the
``practice_planner.sql.alerts`` logger, with bound parameters shortened and
the current request id attached when one exists.
"""

import logging
import re
import time
import weakref
from typing import Any, Dict, Optional

from flask import g, has_request_context
from sqlalchemy import event
from sqlalchemy.engine import Engine

from practice_planner.core.config import (
    get_slow_query_alerts_enabled,
    get_slow_query_threshold_ms,
)

logger = logging.getLogger("practice_planner.sql.alerts")

_TABLE_PATTERN = re.compile(r"\b(?:FROM|INTO|UPDATE)\s+\"?(\w+)\"?", re.IGNORECASE)
_PARAM_LIMIT = 80
_STATEMENT_LIMIT = 500

_timed_engines: "weakref.WeakSet[Engine]" = weakref.WeakSet()


def _shorten(value: Any, limit: int) -> str:
    text = str(value)
    return text if len(text) <= limit else text[:limit] + "..."


def describe_params(params: Any) -> Any:
    """Shorten bound parameters so identifiers stay readable and blobs do not."""
    if isinstance(params, dict):
        return {key: describe_params(value) for key, value in params.items()}
    if isinstance(params, (list, tuple)):
        return [describe_params(item) for item in params]
    if isinstance(params, bytes):
        return f"<{len(params)} bytes>"
    return _shorten(params, _PARAM_LIMIT)


def statement_table(statement: str) -> Optional[str]:
    """First table named by a SELECT/INSERT/UPDATE/DELETE statement."""
    match = _TABLE_PATTERN.search(statement or "")
    return match.group(1) if match else None


def _request_context() -> Dict[str, Any]:
    if not has_request_context():
        return {}
    context = {}
    for key in ("request_id", "route"):
        value = getattr(g, key, None)
        if value:
            context[key] = value
    return context


def report_slow_query(
    duration_ms: float, statement: str, parameters: Any, database: Optional[str]
) -> None:
    context: Dict[str, Any] = {
        "duration_ms": round(duration_ms, 2),
        "threshold_ms": get_slow_query_threshold_ms(),
        "table": statement_table(statement),
        "statement": _shorten(statement or "", _STATEMENT_LIMIT),
        "params": describe_params(parameters),
        "database": database,
    }
    context.update(_request_context())
    logger.warning("Slow query detected", extra={"context": context})


def register_query_timing(engine: Engine) -> None:
    """Attach slow query listeners to ``engine`` once."""
    if engine in _timed_engines:
        return
    database = engine.url.database

    @event.listens_for(engine, "before_cursor_execute")
    def _start_timer(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_started", []).append(time.perf_counter())

    @event.listens_for(engine, "after_cursor_execute")
    def _check_duration(conn, cursor, statement, parameters, context, executemany):
        started = conn.info.get("query_started")
        if not started:
            return
        duration_ms = (time.perf_counter() - started.pop()) * 1000.0
        if get_slow_query_alerts_enabled() and duration_ms >= get_slow_query_threshold_ms():
            report_slow_query(duration_ms, statement, parameters, database)

    _timed_engines.add(engine)
