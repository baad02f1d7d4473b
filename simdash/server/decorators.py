# simdash/server/decorators.py
from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from flask import jsonify

from simdash.utils.logger import logs


def cycle_lookup(view: Callable[..., Any]) -> Callable[..., Any]:
    """
    Wrap a `/cycles/<cycle_id>` view: a cycle the registry no longer
    holds (never ran, or evicted from history) answers 404 JSON.
    """

    @wraps(view)
    def wrapped(*args, **kwargs):
        cycle_id = kwargs.get("cycle_id")
        try:
            return view(*args, **kwargs)
        except KeyError:
            logs.debug(f"[Server] cycle {cycle_id} not in history")
            body = {"error": "cycle not found", "cycle_id": cycle_id}
            return jsonify(body), 404

    return wrapped
