import asyncio
import time
from datetime import datetime

from seatwatch import config
from seatwatch.errors import FetchError
from seatwatch.pipeline.io import format_rows
from seatwatch.pipeline.merge import freeze_threshold, merge_shows
from seatwatch.pipeline.metrics import DONE, RETIRED, VenueMetrics
from seatwatch.pipeline.retry import on_failure
from seatwatch.pipeline.runlog import RunLog
from seatwatch.pipeline.schedule import next_delay
from seatwatch.utils.dates import format_minute


class Orchestrator:
    """
    Poll every venue until all of its shows are past the stop threshold
    (or its retries run out), then write its shows exactly once.

    Polls travel as venue ids on a work queue. Deferred polls are timer
    tasks that put the id back on the queue when they fire. Terminal
    writes go through a bounded queue drained by a single writer task.
    """

    def __init__(
        self,
        store,
        fetcher,
        sink,
        stop_threshold,
        *,
        day=None,
        log=None,
        retry_budget=None,
        retry_backoff=None,
        retry_backoff_cap=None,
        clock=datetime.now,
        sleep=asyncio.sleep,
    ):
        self.store = store
        self.fetcher = fetcher
        self.sink = sink
        self.stop_threshold = stop_threshold
        self.freeze = freeze_threshold(stop_threshold)
        self.clock = clock
        self.day = day or clock().date()
        self.log = log or RunLog()
        self.retry_budget = config.RETRY_BUDGET if retry_budget is None else retry_budget
        self.retry_backoff = config.RETRY_BACKOFF_SECONDS if retry_backoff is None else retry_backoff
        self.retry_backoff_cap = (
            config.RETRY_BACKOFF_MAX_SECONDS if retry_backoff_cap is None else retry_backoff_cap
        )
        self._sleep = sleep
        self.metrics = {venue.venue_id: VenueMetrics(name=venue.name) for venue in store}

    async def run(self):
        self._polls = asyncio.Queue()
        self._writes = asyncio.Queue(maxsize=config.WRITE_QUEUE_SIZE)
        self._active = sum(1 for venue in self.store if not venue.terminal)

        async with asyncio.TaskGroup() as tg:
            self._tg = tg
            tg.create_task(self._writer())
            for venue in self.store:
                if not venue.terminal:
                    self._poll_now(venue.venue_id)
            if self._active == 0:
                self._polls.put_nowait(None)
            await self._dispatch()

        return self.metrics

    async def _dispatch(self):
        while True:
            venue_id = await self._polls.get()
            if venue_id is None:
                break
            self._tg.create_task(self._poll(self.store.get(venue_id)))
        await self._writes.put(None)

    async def _writer(self):
        while True:
            rows = await self._writes.get()
            if rows is None:
                return
            await asyncio.to_thread(self.sink.append, rows)

    def _poll_now(self, venue_id):
        self._polls.put_nowait(venue_id)

    def _poll_later(self, venue_id, delay):
        self._tg.create_task(self._timer(venue_id, delay))

    async def _timer(self, venue_id, delay):
        await self._sleep(delay)
        self._polls.put_nowait(venue_id)

    async def _poll(self, venue):
        metrics = self.metrics[venue.venue_id]
        metrics.fetches += 1
        started = time.perf_counter()
        try:
            snapshots = await self.fetcher.fetch(venue, self.day)
        except FetchError as e:
            metrics.duration_ms += (time.perf_counter() - started) * 1000
            await self._on_fetch_error(venue, e)
            return
        metrics.duration_ms += (time.perf_counter() - started) * 1000

        now = self.clock()
        venue.shows, skipped = merge_shows(venue.shows, snapshots, now, self.freeze, self.day)
        metrics.show_count = len(venue.shows)
        for snapshot in skipped:
            self.log(
                f"{venue.prefix} skipped show {snapshot.get('show_id')} "
                f"with unreadable time {snapshot.get('show_time')!r}",
                "WARNING",
            )

        delay = next_delay(venue.shows.values(), self.stop_threshold, now)
        if delay is None:
            if not venue.shows:
                self.log(f"{venue.prefix} is empty", "WARNING")
            await self._finish(venue, DONE)
            self.log(f"{venue.prefix} done")
            return

        metrics.polls_scheduled += 1
        self.log(f"{venue.prefix} next schedule time is {format_minute(now + delay)}")
        self._poll_later(venue.venue_id, delay.total_seconds())

    async def _on_fetch_error(self, venue, error):
        metrics = self.metrics[venue.venue_id]
        metrics.failures += 1
        metrics.error_messages.append(f"{error.kind}: {error}")
        self.log(f"{venue.prefix} failed to fetch film info ({error.kind}): {error}", "ERROR")

        decision = on_failure(venue, self.retry_budget, self.retry_backoff, self.retry_backoff_cap)
        if decision.retire:
            self.log(f"{venue.prefix} run out of retries, writing last successful state to result")
            await self._finish(venue, RETIRED)
            return

        self.log(f"{venue.prefix} retries left: {decision.retries_left}")
        if decision.delay > 0:
            self._poll_later(venue.venue_id, decision.delay)
        else:
            self._poll_now(venue.venue_id)

    async def _finish(self, venue, outcome):
        if venue.terminal:
            raise RuntimeError(f"{venue.prefix} was already written")
        venue.terminal = True

        metrics = self.metrics[venue.venue_id]
        metrics.outcome = outcome
        metrics.show_count = len(venue.shows)

        await self._writes.put(format_rows(venue, self.clock()))

        self._active -= 1
        if self._active == 0:
            self._polls.put_nowait(None)
