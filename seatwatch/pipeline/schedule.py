from datetime import timedelta


def next_delay(shows, stop_threshold, now):
    """
    Time to wait before polling a venue again, or None when no show is
    still worth polling for (including when there are no shows at all).

    Shows are walked in start order; the first whose stop point is still
    ahead of `now` decides the delay.
    """
    stop = timedelta(seconds=stop_threshold)
    for show in sorted(shows, key=lambda s: s.show_time):
        candidate = show.show_time - now - stop
        if candidate < timedelta(0):
            continue
        return candidate
    return None
