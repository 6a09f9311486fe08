"""Observability utilities for the interview service."""
from .logger import log_event

__all__ = ["log_event"]
