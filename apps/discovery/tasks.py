"""Celery tasks for discovery."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import generate_matches

logger = logging.getLogger(__name__)


@shared_task(name="discovery.generate_matches")
def generate_matches_task() -> dict[str, int]:
    """
    Nightly matching run (see config/celery.py).

    Returns:
        dict: {"created", "updated", "removed"}
    """
    try:
        return generate_matches()
    except Exception as e:
        logger.error(f"Matching job failed: {e}", exc_info=True)
        raise
