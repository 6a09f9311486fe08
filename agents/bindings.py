"""Bind gateway-backed completion callables into the model registry."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from config import LlmRoute, load_app_registry
from config.registry import CHAT_KEY, REPORT_KEY, bind_model
from llm_gateway import complete

CHAT_TARGET = "interviewer.chat"
REPORT_TARGET = "report_cards.synthesize"

TARGET_KEYS: Dict[str, str] = {
    CHAT_TARGET: CHAT_KEY,
    REPORT_TARGET: REPORT_KEY,
}


def gateway_model(route: LlmRoute) -> Callable[..., str]:
    """Wrap ``route`` as a registry callable taking ``messages`` and ``options``."""

    def _invoke(*, messages: List[Dict[str, str]], options: Optional[Dict[str, Any]] = None) -> str:
        return complete(messages, cfg=route, options=options)

    return _invoke


def bind_default_models(config_path: Path) -> Dict[str, LlmRoute]:
    """Load the LLM routes from ``config_path`` and bind every model key."""

    routes = load_app_registry(config_path, TARGET_KEYS.keys())
    for target, key in TARGET_KEYS.items():
        bind_model(key, gateway_model(routes[target]))
    return routes


__all__ = ["bind_default_models", "gateway_model"]
