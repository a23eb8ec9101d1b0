"""
Render Jobs
===========

A render job is everything one attempt needs: the target URL, the page
mutations, the card selector, the initial viewport and the capture scale.
Jobs are built fresh for every attempt and never shared between requests.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple
from urllib.parse import urlencode
import json

from src.core.rendering.content import PageMutation
from src.models.schemas import RenderRequest, Viewport

# Request fields consumed by the service rather than forwarded to the page.
DENY_LISTED_FIELDS = frozenset({"icon", "switchConfig", "content", "translate"})
JSON_FIELDS = frozenset({"switchConfig"})


class JobKind(str, Enum):
    """What a job returns."""

    SCREENSHOT = "screenshot"
    MEASURE = "measure"


@dataclass(frozen=True)
class RenderJob:
    kind: JobKind
    target_url: str
    request: RenderRequest
    icon_src: Optional[str]
    mutations: Tuple[PageMutation, ...]
    card_selector: str
    viewport: Viewport
    scale: float
    use_loading_font: bool


def build_target_url(base_url: str, request: RenderRequest) -> str:
    """Append the forwarded request fields to the card page URL."""
    params = [("isApi", "true")]
    for key, value in request.payload().items():
        if key in JSON_FIELDS:
            params.append((key, _to_json(value)))
        elif key not in DENY_LISTED_FIELDS:
            params.append((key, _query_value(value)))
    return f"{base_url}?{urlencode(params)}"


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return _to_json(value)
    return str(value)


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
