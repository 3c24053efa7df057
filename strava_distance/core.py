import logging
from datetime import date
from typing import Callable, Iterable

import requests

from .config import DEFAULT_PER_PAGE, DEFAULT_TIMEOUT
from .dates import date_to_epoch
from .exceptions import ApiError, InputError, MalformedResponse
from .limiter import request_with_retries
from .models import Activity, FetchAccumulator, FetchSummary

logger = logging.getLogger(__name__)

MAX_PER_PAGE = 200


class ActivityFetcher:
	"""Sums the distance of an athlete's activities since a given date.

	Pages through ``/athlete/activities`` sequentially; each page decides
	whether another one is requested. When ``allowed_types`` is given only
	activities of those types count toward the total, otherwise every
	activity does. Any non-success response aborts the whole fetch.
	"""

	ACTIVITIES_URL = "https://www.strava.com/api/v3/athlete/activities"

	def __init__(
		self,
		token: str,
		session: requests.Session | None = None,
		timeout: float = DEFAULT_TIMEOUT,
		max_retries: int = 0,
	) -> None:
		"""Create a new fetcher.

		Parameters
		----------
		token: str
			OAuth access token with ``activity:read_all`` scope.
		session: requests.Session | None
			HTTP session. If omitted the fetcher creates one and closes it in ``close``.
		timeout: float
			Per-request timeout in seconds.
		max_retries: int
			Retries on network-layer failures only; 0 keeps one attempt per page.
		"""
		self.token = token
		self._owns_session = session is None
		self.session = session or requests.Session()
		self.timeout = timeout
		# wrap session.request with retry/backoff logic
		self.request: Callable[..., requests.Response] = request_with_retries(
			self.session.request, max_retries=max_retries
		)

	def close(self) -> None:
		if self._owns_session:
			self.session.close()

	def __enter__(self) -> "ActivityFetcher":
		return self

	def __exit__(self, *exc) -> None:
		self.close()

	def fetch_page(self, after: int, page: int, per_page: int) -> list[Activity]:
		resp = self.request(
			"GET",
			self.ACTIVITIES_URL,
			headers={"Authorization": f"Bearer {self.token}"},
			params={"after": after, "page": page, "per_page": per_page},
			timeout=self.timeout,
		)
		if not 200 <= resp.status_code < 300:
			logger.debug("Activities page %s returned HTTP %s", page, resp.status_code)
			raise ApiError("Strava API request failed", status_code=resp.status_code, details=resp.text)
		try:
			data = resp.json()
		except ValueError:
			raise MalformedResponse("Activities endpoint returned invalid JSON", details=resp.text) from None
		if not isinstance(data, list):
			raise MalformedResponse(f"Expected a JSON array of activities, got {type(data).__name__}")
		return [Activity.from_dict(item) for item in data]

	def fetch_summary(
		self,
		start_date: date,
		allowed_types: Iterable[str] | None = None,
		per_page: int = DEFAULT_PER_PAGE,
	) -> FetchSummary:
		"""Fetch every activity after ``start_date`` (midnight UTC) and aggregate it."""
		if not 1 <= per_page <= MAX_PER_PAGE:
			raise InputError(f"per_page must be between 1 and {MAX_PER_PAGE}, got {per_page}")
		allowed = frozenset(allowed_types) if allowed_types is not None else None
		after = date_to_epoch(start_date)
		logger.info("Fetching activities after %s (after=%s, per_page=%s)", start_date, after, per_page)

		acc = FetchAccumulator()
		page = 1
		pages_fetched = 0
		while True:
			activities = self.fetch_page(after, page, per_page)
			pages_fetched += 1
			if not activities:
				logger.debug("Page %s is empty; end of history", page)
				break

			for activity in activities:
				if allowed is None or activity.activity_type in allowed:
					acc.include(activity)
				else:
					acc.exclude(activity)
			logger.info(
				"Page %s: %d activities (running total: %d included, %d excluded, %.1f m)",
				page, len(activities), acc.included_count, acc.excluded_count, acc.total_distance_meters,
			)

			# a short page is the last page
			if len(activities) < per_page:
				break
			page += 1

		summary = FetchSummary.from_accumulator(acc, pages_fetched)
		logger.info(
			"Fetched %d page(s): %.2f km over %d activities (%d excluded)",
			summary.pages_fetched, summary.kilometers, summary.included_count, summary.excluded_count,
		)
		return summary

	def fetch_total_distance(
		self,
		start_date: date,
		allowed_types: Iterable[str] | None = None,
		per_page: int = DEFAULT_PER_PAGE,
	) -> float:
		return self.fetch_summary(start_date, allowed_types, per_page).kilometers


def fetch_total_distance(
	start_date: date,
	token: str,
	allowed_types: Iterable[str] | None = None,
	per_page: int = DEFAULT_PER_PAGE,
) -> float:
	"""Total kilometers of matching activities since ``start_date``."""
	with ActivityFetcher(token) as fetcher:
		return fetcher.fetch_total_distance(start_date, allowed_types, per_page)
