"""Key derivation and sanitization helpers for concept items"""

import logging
import math
import re
from collections.abc import Container
from typing import Any

from .models import Difficulty

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = Difficulty.undergraduate
DEFAULT_STUDY_HOURS = 10.0

_slug_separator = re.compile(r'[^a-z0-9]+')


def lookup_key(name: str) -> str:
    """Dedup key: the same concept under different casing/padding is one node"""
    return name.strip().lower()


def slugify(name: str) -> str:
    return _slug_separator.sub('-', name.lower())


def mint_node_id(name: str, depth: int, taken: Container[str] = frozenset()) -> str:
    """
    Create node id from concept name and the depth it was introduced at.

    Different names may collapse into the same slug (`C++` and `C#`), so a numeric
    suffix is added while the id is already in `taken`.
    """
    base = f'{slugify(name)}-{depth}'
    node_id = base
    suffix = 2
    while node_id in taken:
        node_id = f'{base}-{suffix}'
        suffix += 1
    return node_id


def clean_name(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def coerce_difficulty(value: Any) -> Difficulty:
    if isinstance(value, str):
        try:
            return Difficulty(value.strip().lower())
        except ValueError:
            pass
    if value is not None:
        logger.debug('Unknown difficulty %r, using %s', value, DEFAULT_DIFFICULTY)
    return DEFAULT_DIFFICULTY


def coerce_study_hours(value: Any) -> float:
    # bool is an int subclass, but True hours is not a meaningful estimate
    if isinstance(value, bool):
        hours = None
    elif isinstance(value, (int, float)):
        hours = float(value)
    elif isinstance(value, str):
        try:
            hours = float(value.strip())
        except ValueError:
            hours = None
    else:
        hours = None

    if hours is None or not math.isfinite(hours) or hours < 0:
        if value is not None:
            logger.debug('Unusable study hours %r, using %s', value, DEFAULT_STUDY_HOURS)
        return DEFAULT_STUDY_HOURS
    return hours


def coerce_description(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ''
