import logging
from datetime import date

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import Response

from contrib_chart.api.schemas.chart import ContributionDataResponse
from contrib_chart.api.schemas.chart import HealthResponse
from contrib_chart.rendering.errors import EncodingError
from contrib_chart.rendering.errors import InvalidColorError
from contrib_chart.rendering.errors import InvalidThemeError
from contrib_chart.rendering.models import ContributionData
from contrib_chart.rendering.models import OutputFormat
from contrib_chart.rendering.models import ThemeMode
from contrib_chart.rendering.palette import parse_hex_color
from contrib_chart.rendering.pipeline import render_chart
from contrib_chart.services.chart_options import build_render_config
from contrib_chart.services.chart_options import reference_date_for
from contrib_chart.services.contributions_service import GitHubAPIError
from contrib_chart.services.contributions_service import UserNotFoundError
from contrib_chart.services.contributions_service import get_contribution_data
from contrib_chart.settings import Settings
from contrib_chart.settings import get_settings


logger = logging.getLogger(__name__)

router = APIRouter()

STALE_WHILE_REVALIDATE_SECONDS = 86400
FIRST_CONTRIBUTION_YEAR = 2008


def get_today() -> date:
    """Return the date charts are anchored to; overridable in tests."""

    return date.today()


def cache_control(max_age: int) -> str:
    return (
        f"public, max-age={max_age}, s-maxage={max_age}, "
        f"stale-while-revalidate={STALE_WHILE_REVALIDATE_SECONDS}"
    )


def _require_username(username: str) -> str:
    normalized_username = username.strip()
    if not normalized_username:
        raise HTTPException(status_code=400, detail="username cannot be empty")
    return normalized_username


def _load_contributions(
    username: str, settings: Settings, today: date, year: int | None
) -> ContributionData:
    try:
        return get_contribution_data(username, settings, today=today, year=year)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail="User not found") from exc
    except GitHubAPIError as exc:
        raise HTTPException(
            status_code=502, detail="GitHub API request failed"
        ) from exc


@router.get("/health/live")
def health_live() -> HealthResponse:
    """Return the liveness response for health checks."""

    return HealthResponse(status="ok")


@router.get("/api/data/{username}")
def get_contribution_data_route(
    username: str,
    response: Response,
    year: int | None = Query(default=None, ge=FIRST_CONTRIBUTION_YEAR),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
) -> ContributionDataResponse:
    """Return per-day contribution counts for a GitHub user."""

    data = _load_contributions(_require_username(username), settings, today, year)
    response.headers["Cache-Control"] = cache_control(settings.data_cache_max_age)
    return ContributionDataResponse.model_validate(data.model_dump())


@router.get(
    "/api/chart/{username}",
    response_class=Response,
    responses={200: {"content": {"image/svg+xml": {}, "image/png": {}}}},
)
def get_chart(
    username: str,
    preset: str | None = None,
    theme: str | None = None,
    mode: ThemeMode = ThemeMode.LIGHT,
    color: str | None = None,
    output_format: OutputFormat = Query(default=OutputFormat.SVG, alias="format"),
    bg: bool | None = None,
    radius: int | None = None,
    gap: int | None = None,
    size: int | None = None,
    margin: int | None = None,
    grid: bool | None = None,
    months: bool | None = None,
    days: bool | None = None,
    scale: bool | None = None,
    show_username: bool | None = Query(default=None, alias="username"),
    year: int | None = Query(default=None, ge=FIRST_CONTRIBUTION_YEAR),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
) -> Response:
    """Render the contribution chart for a GitHub user as SVG or PNG."""

    normalized_username = _require_username(username)

    # Color is validated before any GitHub request is made.
    if color:
        try:
            parse_hex_color(color)
        except InvalidColorError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    config = build_render_config(
        normalized_username,
        default_theme=settings.default_theme,
        preset=preset,
        theme=theme,
        mode=mode,
        color=color,
        bg=bg,
        radius=radius,
        gap=gap,
        size=size,
        margin=margin,
        grid_only=grid,
        show_months=months,
        show_days=days,
        show_scale=scale,
        show_username=show_username,
    )
    data = _load_contributions(normalized_username, settings, today, year)

    try:
        chart = render_chart(
            data.days,
            config,
            reference_date=reference_date_for(year, today),
            output_format=output_format,
        )
    except (InvalidColorError, InvalidThemeError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except EncodingError as exc:
        logger.error("Chart encoding failed for %s", normalized_username)
        raise HTTPException(
            status_code=500, detail="Failed to generate chart"
        ) from exc

    return Response(
        content=chart.content,
        media_type=chart.media_type,
        headers={"Cache-Control": cache_control(settings.chart_cache_max_age)},
    )
