"""Parsing of the textual filter parameter at the transport boundary."""

import json
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


def parse_filter_param(raw: str | None) -> dict[str, Any] | None:
    """Parse a JSON object literal such as ``{"Name": "John"}``.

    Unparsable text, or JSON that is not an object, means "no filter".
    """
    if raw is None or not raw.strip():
        return None

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("filter_param_ignored", reason="invalid_json", raw=raw)
        return None

    if not isinstance(parsed, dict):
        logger.debug("filter_param_ignored", reason="not_an_object", raw=raw)
        return None
    return parsed
