"""API endpoints exposing the dashboard reports."""

from __future__ import annotations

import csv
import io
from dataclasses import fields, is_dataclass
from datetime import date, datetime, timezone
from enum import Enum
from http import HTTPStatus
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request

from ..extensions import limiter
from ..reporting import REPORTS, NoData, ReportBuilder, TimeWindow
from ..reporting.errors import InvalidTimeWindow
from ..reporting.graph_metrics import ComplexityTier
from ..reporting.reports import ReportDefinition
from ..storage import load_snapshot

bp = Blueprint("reports", __name__)


class _BadRequest(ValueError):
    """Raised when query arguments cannot be used."""


def _rate_limit() -> str:
    return current_app.config.get("REPORTS_RATE_LIMIT", "60 per minute")


def _to_json(value: Any) -> Any:
    if value is NoData:
        return None
    if isinstance(value, ComplexityTier):
        return value.label
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def _serialize_row(row: Any) -> dict[str, Any]:
    if not is_dataclass(row):
        raise TypeError(f"cannot serialise report row of type {type(row).__name__}")
    return {field.name: _to_json(getattr(row, field.name)) for field in fields(row)}


def _parse_timestamp(name: str) -> datetime | None:
    raw = request.args.get(name)
    if raw is None or not raw.strip():
        return None
    candidate = raw.strip()
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise _BadRequest(f"{name} must be an ISO-8601 timestamp") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _resolve_window(definition: ReportDefinition) -> TimeWindow | None:
    if definition.default_days is None:
        return None

    days = request.args.get("days", type=float)
    if "days" in request.args and days is None:
        raise _BadRequest("days must be a number")
    days = definition.default_days if days is None else days

    start = _parse_timestamp("start")
    end = _parse_timestamp("end")
    if start is None and end is None:
        return TimeWindow.last(days)
    if end is None:
        end = datetime.now(timezone.utc)
    if start is None:
        start = TimeWindow.last(days, now=end).start
    return TimeWindow(start=start, end=end)


def _positive_int(name: str, maximum: int | None = None) -> int | None:
    if name not in request.args:
        return None
    value = request.args.get(name, type=int)
    if value is None or value < 1:
        raise _BadRequest(f"{name} must be a positive integer")
    if maximum is not None:
        value = min(value, maximum)
    return value


def _resolve_params(definition: ReportDefinition) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if "limit" in definition.params:
        limit = _positive_int("limit", int(current_app.config.get("REPORT_MAX_LIMIT", 500)))
        if limit is not None:
            params["limit"] = limit
    if "min_executions" in definition.params:
        min_executions = _positive_int("min_executions")
        if min_executions is not None:
            params["min_executions"] = min_executions
    if "node_types" in definition.params:
        node_types = [value.strip() for value in request.args.getlist("node_type") if value.strip()]
        if node_types:
            params["node_types"] = node_types
    return params


def _build_report(name: str) -> tuple[TimeWindow | None, list[dict[str, Any]]]:
    definition = REPORTS[name]
    window = _resolve_window(definition)
    params = _resolve_params(definition)

    snapshot = load_snapshot(window)
    builder = ReportBuilder(
        snapshot.workflows,
        snapshot.executions,
        credentials=snapshot.credentials,
        tags=snapshot.tags,
        window=window,
    )
    rows = builder.run(name, **params)
    current_app.logger.debug("Report %s produced %s rows", name, len(rows))
    return window, [_serialize_row(row) for row in rows]


def _error_response(name: str) -> tuple[object, int] | None:
    if name not in REPORTS:
        return jsonify({"error": "unknown report"}), HTTPStatus.NOT_FOUND
    return None


@bp.get("/reports")
def list_reports() -> tuple[object, int]:
    payload = [
        {
            "name": definition.name,
            "title": definition.title,
            "defaultDays": definition.default_days,
            "params": sorted(definition.params),
        }
        for definition in REPORTS.values()
    ]
    return jsonify(payload), HTTPStatus.OK


@bp.get("/reports/<name>")
@limiter.limit(_rate_limit)
def get_report(name: str) -> tuple[object, int]:
    missing = _error_response(name)
    if missing is not None:
        return missing

    try:
        window, rows = _build_report(name)
    except (_BadRequest, InvalidTimeWindow) as exc:
        return jsonify({"error": str(exc)}), HTTPStatus.BAD_REQUEST

    payload = {
        "report": name,
        "window": (
            {"start": window.start.isoformat(), "end": window.end.isoformat()}
            if window is not None
            else None
        ),
        "rows": rows,
    }
    return jsonify(payload), HTTPStatus.OK


@bp.get("/reports/<name>/download")
@limiter.limit(_rate_limit)
def download_report(name: str) -> Response | tuple[object, int]:
    missing = _error_response(name)
    if missing is not None:
        return missing

    try:
        _, rows = _build_report(name)
    except (_BadRequest, InvalidTimeWindow) as exc:
        return jsonify({"error": str(exc)}), HTTPStatus.BAD_REQUEST

    buffer = io.StringIO()
    if rows:
        writer = csv.DictWriter(buffer, fieldnames=list(rows[0]))
        writer.writeheader()
        writer.writerows(rows)

    response = Response(buffer.getvalue(), mimetype="text/csv")
    response.headers["Content-Disposition"] = f"attachment; filename={name}.csv"
    return response
