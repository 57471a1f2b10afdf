"""Shared utility functions."""
import itertools
import re
import uuid
from datetime import datetime, timezone
from pantau_shared.constants import (
    AGE_LABEL_JUST_NOW,
    AGE_LABEL_MINUTES_SUFFIX,
    AGE_LABEL_ONE_HOUR
)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class UuidIdGenerator:
    """Seeds backed by uuid4; collision-free for the process lifetime."""

    def new_seed(self) -> str:
        return uuid.uuid4().hex[:12]


class SequentialIdGenerator:
    """Monotonic counter seeds, for deterministic sessions and tests."""

    def __init__(self, start: int = 1, width: int = 4):
        self._counter = itertools.count(start)
        self._width = width

    def new_seed(self) -> str:
        return f"{next(self._counter):0{self._width}d}"


def build_id_generator(strategy: str):
    """Build the id generator named by ``strategy`` (``uuid`` or ``sequential``)."""
    if strategy == "uuid":
        return UuidIdGenerator()
    if strategy == "sequential":
        return SequentialIdGenerator()
    raise ValueError(f"Unsupported id strategy: {strategy}")


def prefixed_id(prefix: str, seed: str) -> str:
    return f"{prefix}-{seed}"


def advance_age_label(label: str) -> str:
    """Age a human-readable notification timestamp by one minute.

    ``Baru saja`` becomes ``1 menit yang lalu``; ``N menit yang lalu`` counts up
    until 59 and then rolls over to ``1 jam yang lalu``. Any other label is
    returned unchanged.
    """
    if AGE_LABEL_JUST_NOW in label:
        return f"1 {AGE_LABEL_MINUTES_SUFFIX}"
    if AGE_LABEL_MINUTES_SUFFIX in label:
        match = re.match(r"\s*(\d+)", label)
        minutes = int(match.group(1)) if match else 1
        if minutes < 59:
            return f"{minutes + 1} {AGE_LABEL_MINUTES_SUFFIX}"
        return AGE_LABEL_ONE_HOUR
    return label
