"""Transports deliver formatted events to their destination."""

from remitter.transports.base import Transport
from remitter.transports.http import HttpTransport, expand_template
from remitter.transports.memory import RecordingTransport

__all__ = [
    "Transport",
    "HttpTransport",
    "RecordingTransport",
    "expand_template",
]
