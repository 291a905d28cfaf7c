import random
from dataclasses import dataclass

REQUEUE = "requeue"
RETIRE = "retire"


@dataclass(frozen=True)
class RetryDecision:
    action: str
    retries_left: int
    delay: float = 0.0

    @property
    def retire(self):
        return self.action == RETIRE


def backoff_delay(failures, base, cap):
    """Exponential backoff with jitter; zero base means retry immediately."""
    if base <= 0:
        return 0.0
    wait = base * (2 ** (failures - 1)) + random.uniform(0, base)
    return min(wait, cap)


def on_failure(venue, budget, backoff=0.0, backoff_cap=0.0):
    """
    Charge one failed fetch to the venue and decide what happens next.
    Every failure kind costs the same; at zero retries left the venue is retired.
    """
    venue.retries_left = max(venue.retries_left - 1, 0)
    if venue.retries_left == 0:
        return RetryDecision(RETIRE, 0)

    failures = budget - venue.retries_left
    return RetryDecision(REQUEUE, venue.retries_left, backoff_delay(failures, backoff, backoff_cap))
