import asyncio
import random
import time

import requests

from seatwatch import config
from seatwatch.errors import DecodeError, EmptyPayloadError, PayloadShapeError, TransportError
from seatwatch.utils.ratelimit import RateLimiter


def parse_schedule(payload):
    """
    Flatten the time.do payload (films, each with a list of shows)
    into one snapshot dict per show.
    """
    snapshots = []
    for film in payload:
        if not isinstance(film, dict):
            raise PayloadShapeError(f"film entry is not an object: {film!r}")

        shows = film.get("timeShowSectionList") or []
        if not isinstance(shows, list):
            raise PayloadShapeError(f"show list is not an array for film {film.get('filmId')}")

        for show in shows:
            if not isinstance(show, dict):
                raise PayloadShapeError(f"show entry is not an object: {show!r}")
            snapshots.append({
                "show_id": show.get("showPk"),
                "film_id": film.get("filmId"),
                "film_name": film.get("film_name"),
                "film_category": film.get("film_type_name"),
                "film_duration": film.get("deration"),
                "hall_name": show.get("hallName"),
                "language": show.get("lang"),
                "dimension": show.get("dimensional"),
                "price": show.get("price"),
                "original_price": show.get("cardPrice"),
                "rebate_price": show.get("rebatePrice"),
                "service_charge": show.get("serviceCharge"),
                "show_time": show.get("showTime"),
                "tickets_left": show.get("unsold"),
                "capacity": show.get("capacity"),
            })

    return snapshots


class WandaFetcher:
    """Fetch one cinema's schedule for the day from wandacinemas.com."""

    def __init__(self, proxies, rate_limit=None, timeout=None):
        self.proxies = proxies
        self.limiter = RateLimiter(config.RATE_LIMIT_SECONDS if rate_limit is None else rate_limit)
        self.timeout = config.REQUEST_TIMEOUT if timeout is None else timeout

    def build_params(self, venue, day):
        return {
            "m": "init",
            "city_code": venue.city_code,
            "cinema_id": venue.venue_id,
            "day": day.strftime("%Y_%m_%d"),
            "rond": random.random(),
            "_": int(time.time() * 1000),
        }

    def _get(self, params, proxy):
        proxies = {"http": proxy, "https": proxy} if proxy else None
        try:
            resp = requests.get(
                config.WANDA_TIME_URL,
                params=params,
                headers=config.WANDA_HEADERS,
                proxies=proxies,
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        return resp

    async def fetch(self, venue, day):
        """
        Returns the decoded show snapshots, or raises a FetchError subclass
        describing why the response was unusable.
        """
        proxy = self.proxies.next()
        await self.limiter.wait(proxy or "direct")
        resp = await asyncio.to_thread(self._get, self.build_params(venue, day), proxy)
        body = resp.text

        try:
            payload = resp.json()
        except ValueError as e:
            raise DecodeError(f"json parse error: {e}", body=body) from e

        if not isinstance(payload, list):
            raise PayloadShapeError("json not array", body=body)
        if len(payload) == 0:
            raise EmptyPayloadError("is empty", body=body)

        return parse_schedule(payload)
