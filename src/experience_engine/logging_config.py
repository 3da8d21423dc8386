from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

from google.cloud import logging as cloud_logging

SERVICE_NAME = "experience-engine"
TRACE_FIELD = "logging.googleapis.com/trace"

# Trace id of the request currently being served, if any
trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, in the shape Cloud Logging ingests from stderr.

    Records carry the service name and, while a request is being served, its
    trace. With a project id the trace is written as the full
    ``projects/<id>/traces/<trace>`` resource name so entries group under the
    request in the console.
    """

    def __init__(self, *, service: str = SERVICE_NAME, project_id: str | None = None) -> None:
        super().__init__()
        self._service = service
        self._project_id = project_id

    def _trace(self, trace_id: str) -> str:
        if self._project_id:
            return f"projects/{self._project_id}/traces/{trace_id}"
        return trace_id

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "severity": record.levelname,
            "message": record.getMessage(),
            "service": self._service,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
        }

        trace_id = trace_id_var.get()
        if trace_id:
            entry[TRACE_FIELD] = self._trace(trace_id)

        # Structured fields passed as logger.info(..., extra={"extra": {...}})
        fields = getattr(record, "extra", None)
        if isinstance(fields, dict):
            entry.update(fields)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(
    *,
    environment: str = "dev",
    project_id: str | None = None,
    use_cloud_logging: bool = True,
    level: int | None = None,
) -> None:
    """Route experience-engine logs for the API service or the CLI.

    Outside dev, with a project id, the Cloud Logging client handler takes
    over. Everywhere else records are JSON lines on stderr; stdout is kept for
    compiled reports.

    Args:
        environment: Environment name (dev, staging, prod)
        project_id: GCP project ID, used for Cloud Logging and trace names
        use_cloud_logging: Whether the Cloud Logging client may be used
        level: Explicit log level; defaults to DEBUG in dev and INFO elsewhere
    """
    if level is None:
        level = logging.DEBUG if environment == "dev" else logging.INFO

    if use_cloud_logging and project_id and environment != "dev":
        cloud_logging.Client(project=project_id).setup_logging(log_level=level)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(StructuredFormatter(project_id=project_id))
        logging.basicConfig(level=level, handlers=[handler], force=True)

    for noisy in ("google", "urllib3", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def set_trace_id(trace_id: str | None) -> None:
    trace_id_var.set(trace_id)


__all__ = ["SERVICE_NAME", "StructuredFormatter", "set_trace_id", "setup_logging"]
