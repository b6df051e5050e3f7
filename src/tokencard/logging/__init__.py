"""Logging helpers."""

from .event_sink import JsonlEventSink, generate_plotly_report
from .logger import CardLogger

__all__ = ["CardLogger", "JsonlEventSink", "generate_plotly_report"]
