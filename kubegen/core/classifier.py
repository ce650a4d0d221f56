"""Infer deployment shape for commands that do not declare one.

Explicit metadata always wins; the name-based rules below only fill gaps.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from kubegen.core.logger import get_logger

logger = get_logger(__name__)

# Checked in order, first match wins: a "cron-worker" is a cronjob.
KIND_RULES: Tuple[Tuple[str, Sequence[str]], ...] = (
    ("cronjob", ("cron", "schedule")),
    ("daemon", ("daemon", "worker", "queue")),
)
DEFAULT_KIND = "daemon"
KINDS = ("daemon", "cronjob")

SCHEDULE_RULES: Tuple[Tuple[str, str], ...] = (
    ("daily", "0 0 * * *"),
    ("hourly", "0 * * * *"),
)
DEFAULT_SCHEDULE = "*/5 * * * *"

SCALED_MARKERS = ("worker", "queue")
SCALED_REPLICAS = 2
DEFAULT_REPLICAS = 1


@dataclass(frozen=True)
class Classification:
    """Deployment shape of a command."""

    kind: str
    schedule: Optional[str]
    replicas: int


def _matches(name: str, markers: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(marker in lowered for marker in markers)


def _declared(name: str, declared_kind: Optional[str]) -> Optional[str]:
    if not declared_kind:
        return None
    kind = str(declared_kind).strip().lower()
    if kind not in KINDS:
        logger.warning(
            f"Unknown type {declared_kind!r} for command '{name}', inferring from its name"
        )
        return None
    return kind


def infer_kind(name: str) -> str:
    for kind, markers in KIND_RULES:
        if _matches(name, markers):
            return kind
    return DEFAULT_KIND


def infer_schedule(name: str) -> str:
    for marker, schedule in SCHEDULE_RULES:
        if _matches(name, (marker,)):
            return schedule
    return DEFAULT_SCHEDULE


def infer_replicas(name: str) -> int:
    return SCALED_REPLICAS if _matches(name, SCALED_MARKERS) else DEFAULT_REPLICAS


def classify(
    name: str,
    declared_kind: Optional[str] = None,
    declared_schedule: Optional[str] = None,
    declared_replicas: Optional[int] = None,
) -> Classification:
    """Resolve kind, schedule and replica count for a command.

    Args:
        name: Bare command name
        declared_kind: Kind from command metadata, if any
        declared_schedule: Cron schedule from command metadata, if any
        declared_replicas: Replica count from command metadata, if any

    Returns:
        Classification; schedule is None for daemons
    """
    kind = _declared(name, declared_kind) or infer_kind(name)

    schedule = None
    if kind == "cronjob":
        schedule = declared_schedule or infer_schedule(name)

    replicas = declared_replicas if declared_replicas is not None else infer_replicas(name)

    return Classification(kind=kind, schedule=schedule, replicas=replicas)
