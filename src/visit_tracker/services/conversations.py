"""In-memory conversation state keyed by participant."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from visit_tracker.domain.conversations import ConversationState


@dataclass
class ConversationStateStore:
    """Holds at most one conversation state per participant.

    States live only for the process lifetime. Callers wrap every
    read-modify-write in ``serialized`` so that two updates for the same
    participant never interleave; distinct participants use distinct locks.
    """

    _states: dict[int, ConversationState] = field(default_factory=dict)
    _locks: dict[int, asyncio.Lock] = field(default_factory=dict)

    def get(self, participant_id: int) -> ConversationState | None:
        """Return the current state for a participant, if any."""
        return self._states.get(participant_id)

    def set(self, participant_id: int, state: ConversationState) -> None:
        """Replace the participant's state."""
        self._states[participant_id] = state

    def clear(self, participant_id: int) -> None:
        """Drop the participant's state."""
        self._states.pop(participant_id, None)

    @asynccontextmanager
    async def serialized(self, participant_id: int) -> AsyncIterator[None]:
        """Hold the participant's lock for the duration of the block."""
        lock = self._locks.get(participant_id)
        if lock is None:
            lock = self._locks[participant_id] = asyncio.Lock()
        async with lock:
            yield
