import logging
from datetime import date

import httpx
from pydantic import ValidationError

from contrib_chart.clients.github_client import ContributionsNotFoundError
from contrib_chart.clients.github_client import fetch_contribution_days
from contrib_chart.clients.github_client import scrape_contribution_days
from contrib_chart.rendering.calendar import one_year_before
from contrib_chart.rendering.models import ActivityRecord
from contrib_chart.rendering.models import ContributionData
from contrib_chart.settings import Settings


logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    """Raised when GitHub does not know the requested user."""


class GitHubAPIError(Exception):
    """Raised when GitHub requests fail for reasons other than a missing user."""


def contribution_range(year: int | None, today: date) -> tuple[date, date]:
    """Return the date range to request from GitHub.

    A past year covers that calendar year; otherwise the range is the
    trailing year ending today, matching the window the chart draws.
    """

    if year is not None and year < today.year:
        return date(year, 1, 1), date(year, 12, 31)
    return one_year_before(today), today


def build_contribution_data(
    raw_days: list[dict[str, str | int]],
) -> ContributionData:
    """Turn raw day payloads into sorted, one-per-date contribution records.

    Malformed items are skipped. When a date repeats, the later item wins.
    """

    records_by_date: dict[date, ActivityRecord] = {}
    for item in raw_days:
        try:
            record = ActivityRecord.model_validate(item)
        except ValidationError:
            logger.debug("Skipping malformed contribution day: %r", item)
            continue
        records_by_date[record.date] = record

    days = [records_by_date[day] for day in sorted(records_by_date)]
    return ContributionData(total=sum(day.count for day in days), days=days)


def get_contribution_data(
    username: str,
    settings: Settings,
    *,
    today: date,
    year: int | None = None,
) -> ContributionData:
    """Fetch contribution data for `username` from GitHub.

    Uses the GraphQL API when a token is configured and scrapes the public
    contributions page otherwise.
    """

    # The current year is served from the trailing-year page the chart draws.
    past_year = year if year is not None and year < today.year else None

    try:
        if settings.github_token:
            from_day, to_day = contribution_range(year, today)
            raw_days = fetch_contribution_days(
                username=username,
                token=settings.github_token,
                graphql_url=settings.github_graphql_url,
                from_day=from_day,
                to_day=to_day,
            )
        else:
            raw_days = scrape_contribution_days(
                username=username,
                base_url=settings.github_base_url,
                year=past_year,
            )
    except ContributionsNotFoundError as exc:
        raise UserNotFoundError(username) from exc
    except httpx.HTTPStatusError as exc:
        if exc.response.status_code == 404:
            raise UserNotFoundError(username) from exc
        logger.warning(
            "GitHub responded %d for %s", exc.response.status_code, username
        )
        raise GitHubAPIError from exc
    except Exception as exc:
        logger.warning("GitHub request for %s failed: %s", username, exc)
        raise GitHubAPIError from exc

    return build_contribution_data(raw_days)
