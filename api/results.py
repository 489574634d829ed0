"""Vercel serverless function serving published results and the leaderboard."""

import asyncio
import json
import os
import sys
from pathlib import Path

# Add the project root to the path so we can import festival modules
sys.path.insert(0, str(Path(__file__).parent.parent))

# Import stores to register them
from festival.store import jsonfile  # noqa: F401
from festival.store import memory  # noqa: F401

from festival.config import load_config
from festival.standings import calculate_leaderboard
from festival.store import StoreError, open_store
from festival.views import public_results

DEFAULT_STORE = "data/programs.json"


def handler(request):
    """Handle requests for the public results page.

    Accepts:
    - GET: returns {"results": [...published programs...], "leaderboard": {...}}

    The store location comes from the FESTIVAL_STORE environment variable.
    """
    if request.method == "OPTIONS":
        return create_response(
            "",
            status=204,
            headers={
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Methods": "GET, OPTIONS",
                "Access-Control-Allow-Headers": "Content-Type",
            },
        )

    if request.method != "GET":
        return create_response(
            {"error": "Method not allowed. Use GET."},
            status=405,
        )

    try:
        body = asyncio.run(load_results(os.environ.get("FESTIVAL_STORE", DEFAULT_STORE)))
        return create_response(body)
    except StoreError as e:
        return create_response(
            {"error": f"Could not load programs: {e}"},
            status=503,
        )
    except Exception as e:
        return create_response(
            {"error": f"Internal error: {e}"},
            status=500,
        )


async def load_results(location: str) -> dict:
    """Read the collection once and build the public payload."""
    store = open_store(location)
    programs = await store.list_once()
    leaderboard = calculate_leaderboard(programs, load_config())
    return {
        "results": [program.to_dict() for program in public_results(programs)],
        "leaderboard": leaderboard.to_dict(),
    }


def create_response(body, status: int = 200, headers: dict | None = None):
    """Create a response object for Vercel."""
    response_headers = {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
    }
    if headers:
        response_headers.update(headers)

    if isinstance(body, dict):
        body = json.dumps(body, ensure_ascii=False)

    return {
        "statusCode": status,
        "headers": response_headers,
        "body": body,
    }
