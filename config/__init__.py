"""Configuration package for the student interview service."""
from .llm import AppConfig, LlmRoute, load_app_registry, load_config, resolve_registry
from .registry import CHAT_KEY, REPORT_KEY, bind_model, get_model
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "LlmRoute",
    "load_app_registry",
    "load_config",
    "resolve_registry",
    "CHAT_KEY",
    "REPORT_KEY",
    "bind_model",
    "get_model",
    "Settings",
    "settings",
]
