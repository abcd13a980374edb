import re
from collections.abc import Mapping
from datetime import date
from typing import Any

import httpx
from bs4 import BeautifulSoup
from bs4 import Tag


USER_AGENT = "contrib-chart"

CONTRIBUTIONS_QUERY = """
query($login: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $login) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
"""

_COUNT_RE = re.compile(r"(\d[\d,]*) contribution")


class ContributionsNotFoundError(ValueError):
    """Raised when GitHub has no contribution calendar for the user."""


def fetch_contribution_days(
    username: str,
    token: str,
    graphql_url: str,
    from_day: date,
    to_day: date,
) -> list[dict[str, str | int]]:
    """Fetch contribution days between two dates from GitHub GraphQL API."""

    if not token:
        raise ValueError("GITHUB_TOKEN is required for GraphQL requests")

    variables = {
        "login": username,
        "from": f"{from_day.isoformat()}T00:00:00Z",
        "to": f"{to_day.isoformat()}T23:59:59Z",
    }
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }

    response = httpx.post(
        graphql_url,
        json={"query": CONTRIBUTIONS_QUERY, "variables": variables},
        headers=headers,
        timeout=20.0,
    )
    response.raise_for_status()

    payload: Any = response.json()
    if not isinstance(payload, Mapping):
        raise ValueError("GitHub GraphQL response is invalid")

    data = payload.get("data")
    if isinstance(data, Mapping) and "user" in data and data["user"] is None:
        raise ContributionsNotFoundError(f"GitHub user {username!r} not found")

    if payload.get("errors"):
        raise ValueError("GitHub GraphQL returned errors")

    if not isinstance(data, Mapping):
        raise ValueError("GitHub GraphQL data is missing")

    user = data.get("user")
    if not isinstance(user, Mapping):
        raise ContributionsNotFoundError(f"GitHub user {username!r} not found")

    collection = user.get("contributionsCollection")
    if not isinstance(collection, Mapping):
        raise ValueError("GitHub contributionsCollection is missing")

    calendar = collection.get("contributionCalendar")
    if not isinstance(calendar, Mapping):
        raise ValueError("GitHub contributionCalendar is missing")

    weeks = calendar.get("weeks")
    if not isinstance(weeks, list):
        raise ValueError("GitHub contribution weeks are missing")

    days: list[dict[str, str | int]] = []
    for week in weeks:
        if not isinstance(week, Mapping):
            continue
        contribution_days = week.get("contributionDays")
        if not isinstance(contribution_days, list):
            continue
        for item in contribution_days:
            if not isinstance(item, Mapping):
                continue
            raw_date = item.get("date")
            raw_count = item.get("contributionCount")
            if isinstance(raw_date, str) and isinstance(raw_count, int):
                days.append({"date": raw_date, "count": raw_count})

    return days


def _cell_count_text(cell: Tag, soup: BeautifulSoup) -> str | None:
    screen_reader = cell.select_one(".sr-only")
    if screen_reader is not None:
        return screen_reader.get_text(" ", strip=True)

    cell_id = cell.get("id")
    if cell_id:
        tooltip = soup.find("tool-tip", attrs={"for": cell_id})
        if tooltip is not None:
            return tooltip.get_text(" ", strip=True)

    return None


def parse_contributions_page(html: str) -> list[dict[str, str | int]]:
    """Extract contribution days from a GitHub contributions page."""

    soup = BeautifulSoup(html, "html.parser")
    days: list[dict[str, str | int]] = []

    for cell in soup.select(".ContributionCalendar-day"):
        raw_date = cell.get("data-date")
        if not raw_date:
            continue

        day: dict[str, str | int] = {"date": str(raw_date)}
        count_text = _cell_count_text(cell, soup)
        if count_text is not None:
            match = _COUNT_RE.search(count_text)
            day["count"] = int(match.group(1).replace(",", "")) if match else 0
        else:
            # No tooltip to read; keep GitHub's own bucket for the day.
            day["count"] = 0
            raw_level = cell.get("data-level")
            if raw_level and str(raw_level).isdigit():
                day["level"] = int(raw_level) % 5
        days.append(day)

    return days


def scrape_contribution_days(
    username: str, base_url: str, year: int | None = None
) -> list[dict[str, str | int]]:
    """Fetch contribution days by scraping the public contributions page."""

    params: dict[str, str] = {}
    if year is not None:
        params = {"tab": "overview", "from": f"{year}-01-01", "to": f"{year}-12-31"}

    response = httpx.get(
        f"{base_url.rstrip('/')}/users/{username}/contributions",
        params=params,
        headers={"User-Agent": USER_AGENT, "Accept": "text/html"},
        timeout=20.0,
        follow_redirects=True,
    )
    response.raise_for_status()

    days = parse_contributions_page(response.text)
    if not days:
        raise ContributionsNotFoundError(
            f"No contribution data found for user {username!r}"
        )
    return days
