"""Vercel serverless function for recalculating Relative Placement results."""

import json
import logging
import sys
from pathlib import Path

# Add the project root to the path so we can import rpss
sys.path.insert(0, str(Path(__file__).parent.parent))

from rpss.analyze import AnalysisError, analyze_url
from rpss.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(levelname)s:%(name)s:%(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def handler(request):
    """Handle incoming requests to recalculate a results page.

    Accepts POST with JSON body:
        {"url": "https://scoring.dance/...",
         "advanced": false,
         "edits": [{"judge": "Judge A", "competitor": "101/201", "value": 2}]}

    Edits are applied in order (judge by name, competitor by couple id) and
    the placements recalculated. Returns JSON with results and audit trail.
    """
    # Handle CORS preflight
    if request.method == "OPTIONS":
        return create_response(
            "",
            status=204,
            headers={
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Methods": "POST, OPTIONS",
                "Access-Control-Allow-Headers": "Content-Type",
            },
        )

    if request.method != "POST":
        return create_response(
            {"error": "Method not allowed. Use POST."},
            status=405,
        )

    try:
        content_type = request.headers.get("content-type", "")
        if "application/json" not in content_type:
            return create_response(
                {"error": f"Unsupported content type: {content_type}"},
                status=400,
            )

        data = json.loads(request.body.decode("utf-8"))
        url = data.get("url")
        if not url:
            return create_response(
                {"error": "Missing 'url' in request body"},
                status=400,
            )

        result = analyze_url(url)
        apply_edits(result.session, data.get("edits") or [], bool(data.get("advanced")))

        return create_response(result.to_dict())

    except AnalysisError as e:
        return create_response(
            {"error": str(e)},
            status=400,
        )
    except json.JSONDecodeError as e:
        return create_response(
            {"error": f"Invalid JSON: {e}"},
            status=400,
        )
    except Exception as e:
        logger.exception("Unhandled error")
        return create_response(
            {"error": f"Internal error: {e}"},
            status=500,
        )


def apply_edits(session, edits: list[dict], advanced: bool) -> None:
    """Apply score edits to a session and recalculate if anything changed.

    Raises:
        AnalysisError: If edits is not a list of objects, or an edit names an
            unknown judge or competitor
    """
    if not edits:
        return
    if not isinstance(edits, list):
        raise AnalysisError("'edits' must be a list")
    session.set_advanced_mode(advanced)
    judges = {name: j for j, name in enumerate(session.matrix.judges)}
    couples = {couple_id: c for c, couple_id in enumerate(session.matrix.couple_ids)}
    for edit in edits:
        if not isinstance(edit, dict):
            raise AnalysisError(f"Each edit must be an object, got {edit!r}")
        judge = judges.get(edit.get("judge"))
        couple = couples.get(edit.get("competitor"))
        if judge is None or couple is None:
            raise AnalysisError(
                f"Unknown judge or competitor in edit: {edit.get('judge')!r}, "
                f"{edit.get('competitor')!r}"
            )
        session.set_score(judge, couple, edit.get("value"))
    session.recompute()


def create_response(body, status: int = 200, headers: dict = None):
    """Create a response object for Vercel."""
    response_headers = {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
    }
    if headers:
        response_headers.update(headers)

    if isinstance(body, dict):
        body = json.dumps(body)

    # Return in format expected by Vercel Python runtime
    return {
        "statusCode": status,
        "headers": response_headers,
        "body": body,
    }
