"""
Manual weight overrides.

redistribute() rebalances one question's weight vector after a user
sets one option to a new value. The other options share what is left
in proportion to their current weights, so the vector keeps summing
to 100.

EditDebouncer coalesces a burst of slider edits on one question into a
single delivery. Each question gets its own handle, owned by the caller.
"""

import threading
from typing import Callable, List, Optional, Sequence

from surveyweights.model import WEIGHT_TOTAL, Option, round_half_up


def redistribute(options: Sequence[Option], edited_index: int, new_value: int) -> List[Option]:
    """
    Set one option's weight and rebalance the others.

    Args:
        options: Current options (not modified)
        edited_index: Index of the option the user changed
        new_value: New weight, clamped to [0, 100]

    Returns:
        New Option objects whose weights sum to 100

    Raises:
        IndexError: If edited_index is out of range
    """
    if not 0 <= edited_index < len(options):
        raise IndexError(f"Option index {edited_index} out of range for {len(options)} options")

    value = min(WEIGHT_TOTAL, max(0, int(new_value)))
    result = [Option(value=o.value, weight=o.weight) for o in options]
    others = [i for i in range(len(result)) if i != edited_index]

    if not others:
        result[edited_index].weight = WEIGHT_TOTAL
        return result

    result[edited_index].weight = value
    remaining = WEIGHT_TOTAL - value
    others_total = sum(result[i].weight or 0 for i in others)

    if others_total > 0:
        for i in others:
            result[i].weight = round_half_up((result[i].weight or 0) * remaining / others_total)
    else:
        share = remaining // len(others)
        for i in others:
            result[i].weight = share

    # Rounding residual goes to the first other option; a negative residual
    # larger than that option spills over to the next ones.
    diff = WEIGHT_TOTAL - sum(o.weight for o in result)
    for i in others:
        if diff == 0:
            break
        adjusted = max(0, result[i].weight + diff)
        diff -= adjusted - result[i].weight
        result[i].weight = adjusted
    return result


class EditDebouncer:
    """
    Per-question handle that delivers only the last of a burst of edits.

    schedule() replaces any pending vector and restarts the delay;
    when the delay elapses (or flush() is called) the callback receives
    the latest vector once.

    Args:
        callback: Receives the settled option list
        delay: Seconds of quiet before delivery
    """

    def __init__(self, callback: Callable[[List[Option]], None], delay: float = 0.3):
        self._callback = callback
        self._delay = delay
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[List[Option]] = None

    @property
    def pending(self) -> Optional[List[Option]]:
        return self._pending

    def schedule(self, options: List[Option]) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = options
            self._timer = threading.Timer(self._delay, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Deliver the pending vector now, if there is one."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            options, self._pending = self._pending, None
        if options is not None:
            self._callback(options)

    def cancel(self) -> None:
        """Drop the pending vector without delivering it."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None
