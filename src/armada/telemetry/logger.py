"""Logging helpers with optional OpenTelemetry export."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import TelemetryConfig

CONSOLE_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s "
    "| trace_id=%(otelTraceID)s span_id=%(otelSpanID)s"
)

_OTLP_HANDLER: logging.Handler | None = None


class _OtelContextFilter(logging.Filter):
    """Fills trace/span placeholders when no span is active."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        if not hasattr(record, "otelTraceID"):
            record.otelTraceID = "-"
        if not hasattr(record, "otelSpanID"):
            record.otelSpanID = "-"
        return True


def get_logger(name: str = "armada") -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(level: int | str = logging.WARNING) -> None:
    """Send log records to stderr using the console format."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=CONSOLE_FORMAT)
        for handler in root_logger.handlers:
            handler.addFilter(_OtelContextFilter())
    else:
        root_logger.setLevel(level)


def init_logging(config: TelemetryConfig) -> logging.Logger:
    """Forward log records to the OTLP logs endpoint, when one is configured."""
    global _OTLP_HANDLER

    logger = get_logger(config.service_name)
    if not config.otlp_logs_endpoint or _OTLP_HANDLER is not None:
        return logger

    from opentelemetry._logs import set_logger_provider
    from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
    from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
    from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
    from opentelemetry.sdk.resources import Resource

    provider = LoggerProvider(resource=Resource.create(config.resource_dict()))
    exporter = OTLPLogExporter(endpoint=config.otlp_logs_endpoint, insecure=True)
    provider.add_log_record_processor(BatchLogRecordProcessor(exporter))
    set_logger_provider(provider)

    handler = LoggingHandler(level=logging.INFO, logger_provider=provider)
    handler.addFilter(_OtelContextFilter())
    logging.getLogger().addHandler(handler)
    _OTLP_HANDLER = handler
    return logger
