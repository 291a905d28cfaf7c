import csv
import io
import json
import re
from datetime import datetime, timedelta

from seatwatch.utils.dates import format_minute

MISSING = "n/a"

HEADER = [
    "cityCode", "cinemaId", "cinemaName", "showId", "filmId", "filmName",
    "filmCategory", "filmDuration", "hallName", "language", "dimension",
    "price", "originalPrice", "rebatePrice", "serviceCharge", "showTime",
    "updateTime", "captureTime", "ticketLeft", "ticketCapacity",
]

_UNSAFE = re.compile(r"[,\r\n]")


def clean_field(value):
    """Render one value: sentinel for missing, no separators or line breaks."""
    if value is None or value == "":
        return MISSING
    return _UNSAFE.sub("", str(value))


def format_rows(venue, captured_at):
    """One row per show currently held for the venue."""
    captured = format_minute(captured_at)
    rows = []
    for show_id, show in venue.shows.items():
        info = show.info
        values = [
            venue.city_code,
            venue.venue_id,
            venue.name,
            show_id,
            info.film_id,
            info.film_name,
            info.film_category,
            info.film_duration,
            info.hall_name,
            info.language,
            info.dimension,
            info.price,
            info.original_price,
            info.rebate_price,
            info.service_charge,
            format_minute(info.show_time),
            format_minute(show.updated_at),
            captured,
            show.tickets_left,
            info.capacity,
        ]
        rows.append([clean_field(v) for v in values])
    return rows


def render_rows(rows):
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue()


class OutputSink:
    """Append-only CSV destination for one run-day."""

    def __init__(self, path):
        self.path = path

    def bootstrap(self):
        """
        Create the file with a BOM and header row if it doesn't exist yet.
        Returns True if this call created it.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.path, "x", encoding="utf-8", newline="") as f:
                f.write("\ufeff" + render_rows([HEADER]))
        except FileExistsError:
            return False
        return True

    def append(self, rows):
        if not self.path.exists():
            self.bootstrap()
        text = render_rows(rows)
        if not text:
            return
        with open(self.path, "a", encoding="utf-8", newline="") as f:
            f.write(text)


def trim_log_by_time(log_path, retention_days=14):
    """
    Remove log entries older than retention_days.
    Returns list of lines to keep.
    """
    if not log_path.exists():
        return []

    cutoff = datetime.now() - timedelta(days=retention_days)
    cutoff_str = cutoff.strftime("%Y-%m-%d %H:%M:%S")

    kept_lines = []
    current_entry_recent = False

    with open(log_path, "r") as f:
        for line in f:
            match = re.match(r"\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\]", line)
            if match:
                current_entry_recent = match.group(1) >= cutoff_str

            if current_entry_recent:
                kept_lines.append(line)

    return kept_lines


def save_status(path, status):
    """Save run status to disk."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(status, f, indent=2)
