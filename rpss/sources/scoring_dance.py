"""Parser for scoring.dance results pages."""

import json
import re
from datetime import datetime
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from rpss.models import Competitor, Scoresheet

EVENT_TYPES = ("Event", "DanceEvent")


class SourceError(ValueError):
    """Raised when a results page can't be turned into a scoresheet."""
    pass


class PrelimsError(SourceError):
    """Raised when a page is a prelims/callback round.

    Relative Placement needs finals scoresheets where judges give rankings.
    """
    pass


def validate_url(url: str, allowed_domain: str = "scoring.dance") -> None:
    """Check that a URL points at the results site.

    Raises:
        SourceError: If the URL is malformed or on another domain
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise SourceError("Invalid URL format")
    host = parsed.hostname.lower()
    if host != allowed_domain and not host.endswith("." + allowed_domain):
        raise SourceError(f"URL must be from {allowed_domain}")


class ScoringDanceParser:
    """Parser for scoring.dance competition results.

    scoring.dance pages embed JSON-LD with structured data. We look for an
    Event (or DanceEvent) block whose `result` list carries each judge's
    placement, either as `scores` or as `judges_placements`:

        {"@type": "Event", "name": "...", "result": [
            {"placement": 1,
             "dancer": {"leader": {"fullname": "...", "bib": "101"},
                        "follower": {"fullname": "...", "bib": "201"}},
             "scores": [{"name": "Judge A", "placement": 2}, ...]},
            ...]}

    Expected URL format:
        https://scoring.dance/events/<number>/results/<number>.html
        https://scoring.dance/<lang>/events/<number>/results/<number>.html
    """

    URL_PATTERN = re.compile(
        r"^https?://scoring\.dance"
        r"(/[a-z]{2}(-?[A-Z]{2})?)?"  # optional language(+country), e.g. /en, /enUS, /en-US
        r"/events/\d+"
        r"/results/\d+\.html$"
    )

    EXAMPLE_URL = "https://scoring.dance/events/123/results/456.html"

    def can_parse(self, source: str) -> bool:
        """Check if this is a valid scoring.dance results URL."""
        return bool(self.URL_PATTERN.match(source))

    def can_parse_content(self, content: bytes) -> bool:
        """Check if this looks like a scoring.dance HTML page."""
        html = content.decode("utf-8", errors="replace")
        return "application/ld+json" in html and any(
            f'"{t}"' in html for t in EVENT_TYPES
        )

    def parse(self, source: str, content: bytes) -> Scoresheet:
        """Parse scoring.dance HTML content into a Scoresheet.

        Raises:
            PrelimsError: If the page is a prelims round without placements
            SourceError: If no results data is found
        """
        html = content.decode("utf-8", errors="replace")
        soup = BeautifulSoup(html, "lxml")

        event_data = None
        has_event = False
        for script in soup.find_all("script", {"type": "application/ld+json"}):
            try:
                data = json.loads(script.string)
            except (json.JSONDecodeError, TypeError):
                continue
            if not isinstance(data, dict) or data.get("@type") not in EVENT_TYPES:
                continue
            results = data.get("result")
            if not isinstance(results, list) or not results:
                continue
            has_event = True
            if _judge_scores(results[0]):
                event_data = data
                break

        if event_data is None:
            if has_event:
                raise PrelimsError("This looks like a prelims scoresheet from scoring.dance.")
            raise SourceError(
                "No results data found on the page. "
                "Please ensure this is a valid results page."
            )

        return self._parse_json_ld(event_data)

    def _parse_json_ld(self, data: dict) -> Scoresheet:
        """Parse the Event JSON-LD into a Scoresheet."""
        event_name = data.get("name", "Unknown Event")
        round_info = data.get("round", {})
        round_name = round_info.get("name", "") if isinstance(round_info, dict) else ""
        competition_name = f"{event_name} - {round_name}" if round_name else event_name

        results = data["result"]
        judges = [
            score.get("name", f"Judge {i+1}")
            for i, score in enumerate(_judge_scores(results[0]))
        ]
        if not judges:
            raise SourceError("No judges found in results")

        competitors = []
        for index, result in enumerate(results):
            dancer = result.get("dancer") or {}
            leader = dancer.get("leader") or {}
            follower = dancer.get("follower") or {}

            scores = {}
            for score in _judge_scores(result):
                try:
                    scores[score.get("name")] = int(score.get("placement"))
                except (TypeError, ValueError):
                    continue

            competitors.append(Competitor(
                leader=leader.get("fullname", ""),
                follower=follower.get("fullname", ""),
                leader_bib=str(leader.get("bib", "")),
                follower_bib=str(follower.get("bib", "")),
                place=_to_int(result.get("placement"), default=index + 1),
                scores=scores,
                original_index=index,
            ))

        location = data.get("location") or {}
        location_parts = [
            part for part in (location.get("name"), location.get("country")) if part
        ] if isinstance(location, dict) else []

        return Scoresheet(
            competition_name=competition_name,
            judges=judges,
            competitors=competitors,
            category=data.get("category") or data.get("division") or "",
            date=_format_date(data.get("startDate")),
            location=", ".join(location_parts),
            calculation_model=(
                data.get("calculation_model")
                or results[0].get("calculation_model")
                or ""
            ),
        )


def _judge_scores(result: dict) -> list[dict]:
    scores = result.get("scores") or result.get("judges_placements") or []
    return [s for s in scores if isinstance(s, dict)]


def _to_int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _format_date(value: str | None) -> str:
    """Format an ISO start date as M/D/YYYY; pass anything else through."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return value
    return f"{parsed.month}/{parsed.day}/{parsed.year}"
