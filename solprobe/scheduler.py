import logging
import time
from datetime import datetime, timezone
from typing import Callable

from solprobe.models import Evaluation
from solprobe.state import ApplicationState

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 5


class RefreshScheduler:
    """Fixed-cadence driver for full re-evaluations.

    ``evaluate`` is the blocking metrics round trip; ``complete`` applies its
    result to the state and restarts the cadence. Manual and automatic
    refreshes go through the same two steps, so a manual refresh postpones
    the next tick by a full interval.
    """

    def __init__(
        self,
        evaluate: Callable[[], Evaluation],
        interval: float = DEFAULT_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"refresh interval must be positive, got {interval!r}")
        self._evaluate = evaluate
        self.interval = interval
        self._clock = clock
        self._last_tick: float | None = None
        self.refreshed_at: datetime | None = None
        self.refresh_count = 0

    def is_due(self) -> bool:
        """True before the first refresh and once a full interval has passed."""
        if self._last_tick is None:
            return True
        return self._clock() - self._last_tick >= self.interval

    def seconds_until_due(self) -> float:
        """Time left until the next scheduled refresh."""
        if self._last_tick is None:
            return 0.0
        return max(0.0, self.interval - (self._clock() - self._last_tick))

    def evaluate(self) -> Evaluation:
        """Run the metrics round trip without touching any state."""
        logger.debug("Evaluating node metrics")
        return self._evaluate()

    def complete(self, state: ApplicationState, evaluation: Evaluation) -> None:
        """Apply an evaluation and restart the cadence."""
        state.apply(evaluation)
        self._last_tick = self._clock()
        self.refreshed_at = datetime.now(timezone.utc)
        self.refresh_count += 1

    def refresh_now(self, state: ApplicationState) -> None:
        self.complete(state, self.evaluate())

    def tick(self, state: ApplicationState) -> bool:
        """Refresh if the interval has elapsed. Returns whether a refresh ran."""
        if not self.is_due():
            return False
        self.refresh_now(state)
        return True
