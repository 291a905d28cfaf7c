from seatwatch.errors import RosterError
from seatwatch.models import Venue


class VenueStore:
    """Every venue monitored in this run, keyed by venue id."""

    def __init__(self, venues=()):
        self._venues = {}
        for venue in venues:
            self.add(venue)

    def add(self, venue):
        self._venues[venue.venue_id] = venue

    def get(self, venue_id):
        return self._venues[venue_id]

    def __contains__(self, venue_id):
        return venue_id in self._venues

    def __iter__(self):
        return iter(self._venues.values())

    def __len__(self):
        return len(self._venues)


def _clean(value):
    return value.strip().replace('"', "")


def parse_roster(text, retry_budget):
    """
    Parse roster rows of `cinemaId,cinemaName,cityCode`.
    The first row is a header; rows without exactly three fields are skipped.
    """
    venues = []
    for index, line in enumerate(text.strip().split("\n")):
        if index == 0:
            continue
        vals = line.split(",")
        if len(vals) != 3:
            continue
        venue_id, name, city_code = (_clean(v) for v in vals)
        venues.append(Venue(
            venue_id=venue_id,
            name=name,
            city_code=city_code,
            retries_left=retry_budget,
        ))
    return venues


def load_roster(path, retry_budget):
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise RosterError(f"Could not read roster {path}: {e}") from e
    return VenueStore(parse_roster(text, retry_budget))
