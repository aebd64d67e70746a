"""Process-wide logger and telemetry reporter used by the client library."""

from __future__ import annotations

import enum
import logging
from typing import Any, NamedTuple

__all__ = [
    "EventLevel",
    "TelemetryEvent",
    "TelemetryReporter",
    "set_logger",
    "get_logger",
    "set_telemetry_reporting",
    "get_telemetry_reporting",
    "report_event",
]

_PACKAGE_LOGGER = logging.getLogger("cvmattest")
_PACKAGE_LOGGER.addHandler(logging.NullHandler())

_logger: Any = None
_telemetry: TelemetryReporter | None = None


class EventLevel(enum.Enum):
    """Categories of telemetry events emitted by the library."""

    SNP_REPORT_STATUS = "snp_report_status"
    IMDS_RENEW_AK_URL = "imds_renew_ak_url"
    IMDS_RENEW_AK = "imds_renew_ak"
    IMDS_AKRENEW_REQUEST_BODY = "imds_akrenew_request_body"
    IMDS_QUERY_AK = "imds_query_ak"
    IMDS_QUERY_VCEK_CERT = "imds_query_vcek_cert"


class TelemetryEvent(NamedTuple):
    """One recorded telemetry event."""

    name: str
    value: str
    level: EventLevel


class TelemetryReporter:
    """Receives telemetry events; the default keeps them in ``events``.

    Subclass and override :meth:`update_event` to forward events elsewhere.
    """

    def __init__(self) -> None:
        self.events: list[TelemetryEvent] = []

    def update_event(self, name: str, value: str, level: EventLevel) -> None:
        """Record an event."""
        self.events.append(TelemetryEvent(name, value, level))


def set_logger(logger: Any) -> None:
    """Install the library logger. Only the first call has an effect."""
    global _logger
    if _logger is None:
        _logger = logger


def get_logger() -> Any:
    """Return the installed logger, or the package's quiet default logger."""
    return _logger if _logger is not None else _PACKAGE_LOGGER


def set_telemetry_reporting(reporter: TelemetryReporter) -> None:
    """Install the telemetry reporter. Only the first call has an effect."""
    global _telemetry
    if _telemetry is None:
        _telemetry = reporter


def get_telemetry_reporting() -> TelemetryReporter | None:
    """Return the installed telemetry reporter, if any."""
    return _telemetry


def report_event(name: str, value: str, level: EventLevel) -> bool:
    """Send an event to the installed reporter; return whether one was installed."""
    if _telemetry is None:
        return False
    _telemetry.update_event(name, value, level)
    return True