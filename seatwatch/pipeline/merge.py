from datetime import timedelta

from seatwatch import config
from seatwatch.models import Show, ShowInfo
from seatwatch.utils.dates import show_start


def freeze_threshold(stop_threshold):
    """How long before showtime incoming updates stop being merged (negative = after start)."""
    return timedelta(seconds=stop_threshold - config.FREEZE_MARGIN_SECONDS)


def new_show(snapshot, day, now):
    start = show_start(day, snapshot.get("show_time"))
    if start is None:
        return None
    info = ShowInfo(
        show_id=snapshot["show_id"],
        show_time=start,
        film_id=snapshot.get("film_id"),
        film_name=snapshot.get("film_name"),
        film_category=snapshot.get("film_category"),
        film_duration=snapshot.get("film_duration"),
        hall_name=snapshot.get("hall_name"),
        language=snapshot.get("language"),
        dimension=snapshot.get("dimension"),
        price=snapshot.get("price"),
        original_price=snapshot.get("original_price"),
        rebate_price=snapshot.get("rebate_price"),
        service_charge=snapshot.get("service_charge"),
        capacity=snapshot.get("capacity"),
    )
    return Show(info=info, tickets_left=snapshot.get("tickets_left"), updated_at=now)


def merge_shows(existing, snapshots, now, freeze, day):
    """
    Merge freshly fetched show snapshots into a venue's known shows.
    - Unknown shows are added with everything taken from the snapshot
    - Known shows only get tickets_left/updated_at refreshed (last write wins)
    - Known shows inside the freeze window are left untouched
    Returns (merged_shows, skipped_snapshots); the input mapping is not modified.
    """
    merged = dict(existing)
    skipped = []

    for snapshot in snapshots:
        show_id = snapshot.get("show_id")
        if show_id is None:
            skipped.append(snapshot)
            continue

        current = merged.get(show_id)
        if current is None:
            show = new_show(snapshot, day, now)
            if show is None:
                skipped.append(snapshot)
                continue
            merged[show_id] = show
            continue

        if current.show_time - now < freeze:
            continue
        merged[show_id] = current.refreshed(snapshot.get("tickets_left"), now)

    return merged, skipped
