from dataclasses import dataclass, field, replace
from datetime import datetime


@dataclass(frozen=True)
class ShowInfo:
    """Fields captured the first time a show is seen; never rewritten."""
    show_id: str
    show_time: datetime
    film_id: object = None
    film_name: object = None
    film_category: object = None
    film_duration: object = None
    hall_name: object = None
    language: object = None
    dimension: object = None
    price: object = None
    original_price: object = None
    rebate_price: object = None
    service_charge: object = None
    capacity: object = None


@dataclass(frozen=True)
class Show:
    info: ShowInfo
    tickets_left: object
    updated_at: datetime

    @property
    def show_time(self):
        return self.info.show_time

    def refreshed(self, tickets_left, now):
        return replace(self, tickets_left=tickets_left, updated_at=now)


@dataclass
class Venue:
    """A cinema being monitored and everything observed about it this run."""
    venue_id: str
    name: str
    city_code: str
    retries_left: int
    shows: dict = field(default_factory=dict)
    terminal: bool = False

    @property
    def prefix(self):
        return f"{self.city_code}-{self.venue_id}-{self.name}"
