"""Utilities for serialising API responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Tuple

from flask import jsonify

ResponseTuple = Tuple[Any, int]


def build_json_response(payload: Mapping[str, Any], status: int = 200) -> ResponseTuple:
    """Return a Flask JSON response for ``payload``."""

    return jsonify(payload), status


__all__ = ["ResponseTuple", "build_json_response"]
