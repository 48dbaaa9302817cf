"""Helpers for normalising incoming API requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

USER_ID_HEADER = "X-User-Id"
ANONYMOUS_USER = "anonymous"


def parse_json_payload(req: Request) -> dict[str, Any]:
    """Extract a JSON object from ``req``, rejecting anything else."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    return dict(data)


def resolve_user_id(req: Request) -> str:
    """Return the caller identity used to look up recorded transactions."""

    user_id = req.headers.get(USER_ID_HEADER, "").strip()
    return user_id or ANONYMOUS_USER


__all__ = ["ANONYMOUS_USER", "USER_ID_HEADER", "parse_json_payload", "resolve_user_id"]
