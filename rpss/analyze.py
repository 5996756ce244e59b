"""Orchestrator: fetch and parse a results page, then rank it."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from rpss.config import settings
from rpss.models import Scoresheet
from rpss.ranking import PlacementEngine
from rpss.session import EditSession
from rpss.sources.scoring_dance import (
    PrelimsError,
    ScoringDanceParser,
    SourceError,
    validate_url,
)

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """A parsed scoresheet with its editable, ranked session."""
    scoresheet: Scoresheet
    session: EditSession

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        sheet = self.scoresheet
        return {
            "competition_name": sheet.competition_name,
            "event": {
                "category": sheet.category,
                "date": sheet.date,
                "location": sheet.location,
                "judges": ", ".join(sheet.judges),
                "calculation_model": sheet.calculation_model,
            },
            "num_competitors": sheet.num_competitors,
            "num_judges": sheet.num_judges,
            **self.session.to_dict(),
        }


class AnalysisError(Exception):
    """Error during scoresheet analysis."""
    pass


def make_engine() -> PlacementEngine:
    return PlacementEngine(max_iterations=settings.MAX_ITERATIONS)


def analyze_scoresheet(source: str, content: bytes) -> AnalysisResult:
    """Parse a results page and rank it.

    Args:
        source: URL or filename the content came from
        content: Raw bytes of the page

    Raises:
        AnalysisError: If the page can't be parsed or its scores are invalid
    """
    parser = ScoringDanceParser()
    if not parser.can_parse(source) and not parser.can_parse_content(content):
        raise AnalysisError(
            "We couldn't find results data on this page.\n\n"
            f"We currently support results pages like {parser.EXAMPLE_URL}"
        )

    try:
        scoresheet = parser.parse(source, content)
    except PrelimsError:
        raise AnalysisError(
            "This looks like a prelims scoresheet. "
            "Relative Placement can only be recalculated for finals scoresheets."
        ) from None
    except SourceError as e:
        raise AnalysisError(str(e)) from e

    try:
        session = EditSession(scoresheet, engine=make_engine())
    except ValueError as e:
        raise AnalysisError(f"Failed to calculate placements: {e}") from e

    logger.info(
        "Ranked %s: %d couples, %d judges",
        scoresheet.competition_name,
        scoresheet.num_competitors,
        scoresheet.num_judges,
    )
    return AnalysisResult(scoresheet=scoresheet, session=session)


def fetch_url(url: str, timeout: float | None = None) -> tuple[str, bytes]:
    """Fetch a results page.

    Returns (source_identifier, content_bytes).
    """
    try:
        validate_url(url, settings.ALLOWED_DOMAIN)
    except SourceError as e:
        raise AnalysisError(str(e)) from e

    try:
        with httpx.Client(
            follow_redirects=True,
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT_S,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
            return url, response.content
    except httpx.HTTPStatusError as e:
        raise AnalysisError(f"HTTP error fetching URL: {e.response.status_code}")
    except httpx.RequestError as e:
        raise AnalysisError(
            f"Unable to connect to the server. Please check your internet connection. ({e})"
        )


def analyze_url(url: str) -> AnalysisResult:
    """Fetch a results page and rank it."""
    source, content = fetch_url(url)
    return analyze_scoresheet(source, content)
