from datetime import datetime

MINUTE_FORMAT = "%Y-%m-%d %H:%M"
SHOW_TIME_FORMATS = ("%H:%M", "%H:%M:%S")


def show_start(day, time_str):
    """
    Combine the run's logical date with a show's 24-hour time-of-day
    ("19:30" or "19:30:00"). Returns a naive local datetime, or None
    if the time can't be read.
    """
    if not time_str:
        return None
    for fmt in SHOW_TIME_FORMATS:
        try:
            parsed = datetime.strptime(str(time_str).strip(), fmt)
        except ValueError:
            continue
        return datetime.combine(day, parsed.time().replace(second=0))
    return None


def format_minute(value):
    if value is None:
        return None
    return value.strftime(MINUTE_FORMAT)
