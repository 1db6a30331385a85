"""
Utility modules for PlayNow.
"""
from .event_logger import EventLogger, EventType, get_event_logger, set_event_logger

__all__ = ["EventLogger", "EventType", "get_event_logger", "set_event_logger"]
