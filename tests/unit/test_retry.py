from seatwatch.models import Venue
from seatwatch.pipeline.retry import REQUEUE, RETIRE, backoff_delay, on_failure


def make_venue(retries):
    return Venue(venue_id="1001", name="Wanda CBD", city_code="110100", retries_left=retries)


def test_on_failure_retires_on_last_retry():
    venue = make_venue(3)
    decisions = [on_failure(venue, 3) for _ in range(3)]

    assert [d.action for d in decisions] == [REQUEUE, REQUEUE, RETIRE]
    assert [d.retries_left for d in decisions] == [2, 1, 0]
    assert decisions[-1].retire is True
    assert venue.retries_left == 0


def test_on_failure_requeues_immediately_by_default():
    decision = on_failure(make_venue(20), 20)
    assert decision.action == REQUEUE
    assert decision.delay == 0.0


def test_on_failure_never_goes_negative():
    venue = make_venue(0)
    assert on_failure(venue, 3).retire is True
    assert venue.retries_left == 0


def test_backoff_delay_grows_and_caps():
    assert backoff_delay(1, 0, 300) == 0.0
    first = backoff_delay(1, 2, 300)
    third = backoff_delay(3, 2, 300)
    assert 2 <= first <= 4
    assert 8 <= third <= 10
    assert backoff_delay(20, 2, 30) == 30


def test_on_failure_applies_backoff_when_configured():
    venue = make_venue(5)
    on_failure(venue, 5, backoff=1, backoff_cap=60)
    decision = on_failure(venue, 5, backoff=1, backoff_cap=60)
    assert decision.action == REQUEUE
    assert 2 <= decision.delay <= 3
