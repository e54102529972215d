"""
Structured activity logging helpers for planning workflows.
"""

from __future__ import annotations

import json
import logging
from typing import Any

activity_logger = logging.getLogger("planning.activity")


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.
    """

    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))


def log_activity(
    *,
    module: str,
    action: str,
    description: str,
    entity_id: Any = None,
    entity_name: str | None = None,
    **fields: Any,
) -> None:
    """
    Record a user-visible activity (what changed, where) on the activity logger.

    Activity lines go to logging only; persisting them is left to whatever
    log pipeline the deployment ships them to.
    """

    log_event(
        activity_logger,
        logging.INFO,
        f"{module}.{action}",
        module=module,
        action=action,
        description=description,
        entity_id=entity_id,
        entity_name=entity_name,
        **fields,
    )
