"""Distance-based creature update staggering.

Creatures far from the player update less often. Instead of wall-clock
timers the delay is converted into a "next eligible tick" and kept in a heap
that the tick driver polls.
"""

from __future__ import annotations

import logging
import math
import random
from heapq import heappop, heappush

from dreamland_engine.balance import CreatureSimulationBalance, DelayRange
from dreamland_engine.models import Position

DEFAULT_SIMULATION_BALANCE = CreatureSimulationBalance()


def chebyshev_distance(a: Position, b: Position) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def delay_range_for_distance(
    distance: float, balance: CreatureSimulationBalance = DEFAULT_SIMULATION_BALANCE
) -> DelayRange:
    if distance <= balance.distance_immediate:
        return balance.update_delay_immediate
    if distance <= balance.distance_short:
        return balance.update_delay_short
    if distance <= balance.distance_medium:
        return balance.update_delay_medium
    return balance.update_delay_long


def calculate_update_delay_ms(
    distance: float,
    rng: random.Random,
    balance: CreatureSimulationBalance = DEFAULT_SIMULATION_BALANCE,
) -> int:
    window = delay_range_for_distance(distance, balance)
    if window.max <= window.min:
        return window.min
    return round(rng.uniform(window.min, window.max))


class CreatureUpdateScheduler:
    """Min-heap of ``(next_tick, sequence, creature_id)``.

    Rescheduling or removing a creature leaves its old heap entry in place;
    such stale entries are skipped when popped.
    """

    def __init__(
        self,
        *,
        tick_duration_ms: int = 100,
        rng: random.Random | None = None,
        balance: CreatureSimulationBalance = DEFAULT_SIMULATION_BALANCE,
        logger: logging.Logger | None = None,
    ) -> None:
        if tick_duration_ms <= 0:
            raise ValueError("tick_duration_ms must be positive")
        self._tick_duration_ms = tick_duration_ms
        self._rng = rng or random.Random()
        self._balance = balance
        self._logger = logger or logging.getLogger("dreamland_engine.scheduling")

        self._heap: list[tuple[int, int, str]] = []
        self._live: dict[str, tuple[int, int]] = {}
        self._sequence = 0

    def __len__(self) -> int:
        return len(self._live)

    def __contains__(self, creature_id: object) -> bool:
        return creature_id in self._live

    def next_tick(self, creature_id: str) -> int | None:
        entry = self._live.get(creature_id)
        return entry[0] if entry else None

    def ticks_for_delay(self, delay_ms: int) -> int:
        return max(1, math.ceil(delay_ms / self._tick_duration_ms))

    def schedule(self, creature_id: str, current_tick: int, delay_ms: int = 0) -> int:
        due = current_tick + self.ticks_for_delay(delay_ms)
        self._sequence += 1
        self._live[creature_id] = (due, self._sequence)
        heappush(self._heap, (due, self._sequence, creature_id))
        return due

    def schedule_by_distance(
        self, creature_id: str, creature_position: Position, player_position: Position, current_tick: int
    ) -> int:
        distance = chebyshev_distance(creature_position, player_position)
        delay_ms = calculate_update_delay_ms(distance, self._rng, self._balance)
        return self.schedule(creature_id, current_tick, delay_ms)

    def remove(self, creature_id: str) -> None:
        self._live.pop(creature_id, None)

    def pop_due(self, tick: int) -> list[str]:
        """Creature ids whose next eligible tick is ``<= tick``, soonest first."""
        due: list[str] = []
        while self._heap and self._heap[0][0] <= tick:
            entry_tick, sequence, creature_id = heappop(self._heap)
            if self._live.get(creature_id) != (entry_tick, sequence):
                continue
            del self._live[creature_id]
            due.append(creature_id)
        if due:
            self._logger.debug("creatures_due", extra={"tick": tick, "count": len(due)})
        return due

    def clear(self) -> None:
        self._heap.clear()
        self._live.clear()
