"""Punch legality rules for a single worker on a single calendar day.

Each kind may be recorded at most once per day, in the order
arrive -> break start -> break end -> depart. The set of kinds already
recorded is mapped onto a ``PunchState`` and the state alone decides what
may come next.
"""
from __future__ import annotations

import logging
from typing import AbstractSet, FrozenSet, Iterable, Mapping, Optional

from ..core.enums import PunchKind, PunchState, WorkerStatus
from ..core.exceptions import InvalidTransition

logger = logging.getLogger(__name__)

A = PunchKind.ARRIVE_SITE
BS = PunchKind.BREAK_START
BE = PunchKind.BREAK_END
D = PunchKind.DEPART_SITE

# Presence sets reachable through legal punches. Anything else is corrupt.
_STATE_BY_KINDS: Mapping[FrozenSet[PunchKind], PunchState] = {
    frozenset(): PunchState.NOT_STARTED,
    frozenset({A}): PunchState.WORKING,
    frozenset({A, BS}): PunchState.ON_BREAK,
    frozenset({A, BS, BE}): PunchState.BACK_FROM_BREAK,
    frozenset({A, D}): PunchState.DEPARTED,
    frozenset({A, BS, BE, D}): PunchState.DEPARTED,
}

_STRICT_TRANSITIONS: Mapping[PunchState, FrozenSet[PunchKind]] = {
    PunchState.NOT_STARTED: frozenset({A}),
    PunchState.WORKING: frozenset({BS}),
    PunchState.ON_BREAK: frozenset({BE}),
    PunchState.BACK_FROM_BREAK: frozenset({D}),
    PunchState.DEPARTED: frozenset(),
}

_STATUS_BY_STATE: Mapping[PunchState, WorkerStatus] = {
    PunchState.NOT_STARTED: WorkerStatus.OFF_SITE,
    PunchState.WORKING: WorkerStatus.ACTIVE,
    PunchState.ON_BREAK: WorkerStatus.ON_BREAK,
    PunchState.BACK_FROM_BREAK: WorkerStatus.ACTIVE,
    PunchState.DEPARTED: WorkerStatus.OFF_SITE,
}


def state_of(existing: Iterable[PunchKind]) -> Optional[PunchState]:
    """Map the kinds recorded today onto a state, or None if no legal sequence produces them."""
    return _STATE_BY_KINDS.get(frozenset(PunchKind(k) for k in existing))


def status_for(state: PunchState) -> WorkerStatus:
    return _STATUS_BY_STATE[state]


class PunchValidator:
    """Decides which punch kinds a worker may record next on a given day.

    ``require_break`` selects the literal rule where departure needs a closed
    break. By default a day without any break may end with a departure, the
    same as a day whose break was closed.
    """

    def __init__(self, *, require_break: bool = False):
        transitions = dict(_STRICT_TRANSITIONS)
        if not require_break:
            transitions[PunchState.WORKING] = frozenset({BS, D})
        self._transitions: Mapping[PunchState, FrozenSet[PunchKind]] = transitions
        self.require_break = require_break

    def allowed_kinds(self, existing: AbstractSet[PunchKind]) -> FrozenSet[PunchKind]:
        state = state_of(existing)
        if state is None:
            logger.warning("Unreachable punch combination %s; nothing may be recorded", sorted(PunchKind(k).value for k in existing))
            return frozenset()
        return self._transitions[state]

    def can_record(self, existing: AbstractSet[PunchKind], candidate: PunchKind) -> bool:
        return PunchKind(candidate) in self.allowed_kinds(existing)

    def validate(self, existing: AbstractSet[PunchKind], candidate: PunchKind, *, worker_id: Optional[str] = None) -> PunchState:
        """Raise InvalidTransition unless ``candidate`` may be recorded; return the resulting state."""
        candidate = PunchKind(candidate)
        state = state_of(existing)
        if not self.can_record(existing, candidate):
            raise InvalidTransition(
                f"{candidate.label} is not allowed now (state: {state.value if state else 'INCONSISTENT'})",
                worker_id=worker_id,
                kind=candidate,
                state=state,
            )
        return _STATE_BY_KINDS[frozenset(PunchKind(k) for k in existing) | {candidate}]
