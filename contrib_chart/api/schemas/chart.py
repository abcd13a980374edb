from datetime import date

from pydantic import BaseModel


class ContributionDay(BaseModel):
    """Single day item used in the contribution data response."""

    date: date
    count: int
    level: int


class ContributionDataResponse(BaseModel):
    """Contribution data for a user, one item per day in date order."""

    total: int
    days: list[ContributionDay]


class HealthResponse(BaseModel):
    status: str
