"""AI insights: a short generated summary of festival progress.

Purely cosmetic. Any failure degrades to a fixed message instead of raising.
"""

import json
import logging

import httpx

from festival.config import DEFAULT_CONFIG, FestivalConfig
from festival.models import Program

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Unable to load AI insights. Please check your connection."
EMPTY_MESSAGE = "No insights available at this time."


def build_prompt(programs: list[Program]) -> str:
    summary = [
        {"name": p.name, "status": p.status.value, "category": p.category}
        for p in programs
    ]
    return (
        "Analyze the following festival program data and provide a concise "
        "2-sentence executive summary of the festival progress and any notable trends.\n"
        f"Data: {json.dumps(summary, ensure_ascii=False)}"
    )


def extract_text(payload: dict) -> str:
    """Pull the generated text out of a generateContent response body."""
    if not isinstance(payload, dict):
        return ""
    parts = []
    for candidate in payload.get("candidates") or []:
        for part in (candidate.get("content") or {}).get("parts") or []:
            if part.get("text"):
                parts.append(part["text"])
    return "".join(parts).strip()


async def generate_insights(
    programs: list[Program],
    config: FestivalConfig = DEFAULT_CONFIG,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Ask the text-generation API for a two-sentence summary.

    Args:
        programs: The program collection to summarise
        config: API location, key, model and timeout
        client: Optional client to send the request with (tests pass one
            with a mock transport)

    Returns:
        The generated text, or a fixed fallback message.
    """
    if not config.insights_api_key:
        logger.warning("Insights API key not configured")
        return UNAVAILABLE_MESSAGE

    url = f"{config.insights_url.rstrip('/')}/{config.insights_model}:generateContent"
    body = {"contents": [{"parts": [{"text": build_prompt(programs)}]}]}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=config.insights_timeout) as own_client:
                response = await own_client.post(
                    url, params={"key": config.insights_api_key}, json=body
                )
        else:
            response = await client.post(url, params={"key": config.insights_api_key}, json=body)
        response.raise_for_status()
        text = extract_text(response.json())
    except httpx.HTTPStatusError as e:
        logger.warning("Insights request failed: HTTP %s", e.response.status_code)
        return UNAVAILABLE_MESSAGE
    except (httpx.RequestError, ValueError) as e:
        logger.warning("Insights request failed: %s", e)
        return UNAVAILABLE_MESSAGE

    return text or EMPTY_MESSAGE
