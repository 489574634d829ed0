"""Tests for the AI insights summary."""

import asyncio
import json

import httpx
from tests.conftest import make_program

from festival.config import FestivalConfig
from festival.insights import (
    EMPTY_MESSAGE,
    UNAVAILABLE_MESSAGE,
    build_prompt,
    extract_text,
    generate_insights,
)
from festival.models import ProgramStatus

CONFIG = FestivalConfig(insights_api_key="test-key", insights_url="https://llm.test/v1/models/")


def reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def generate(handler, programs=None, config=CONFIG) -> str:
    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await generate_insights(programs or [], config, client=client)

    return asyncio.run(scenario())


class TestGenerateInsights:
    def setup_method(self):
        self.programs = [
            make_program(name="Quiz", category="B zone stage", status=ProgramStatus.COMPLETED),
            make_program(name="Mime", category="General"),
        ]

    def test_returns_generated_text(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=reply("  Half the programs are done.  "))

        assert generate(handler, self.programs) == "Half the programs are done."
        request = requests[0]
        assert request.method == "POST"
        assert request.url.path == "/v1/models/gemini-2.0-flash:generateContent"
        assert request.url.params["key"] == "test-key"
        body = json.loads(request.content)
        prompt = body["contents"][0]["parts"][0]["text"]
        assert '"name": "Quiz"' in prompt
        assert '"status": "COMPLETED"' in prompt

    def test_empty_reply(self):
        assert generate(lambda request: httpx.Response(200, json={"candidates": []})) == EMPTY_MESSAGE

    def test_http_error(self):
        assert generate(lambda request: httpx.Response(500, text="oops")) == UNAVAILABLE_MESSAGE

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("no route", request=request)

        assert generate(handler) == UNAVAILABLE_MESSAGE

    def test_invalid_json(self):
        assert generate(lambda request: httpx.Response(200, text="<html>")) == UNAVAILABLE_MESSAGE

    def test_missing_api_key(self):
        def handler(request):
            raise AssertionError("no request expected")

        assert generate(handler, config=FestivalConfig()) == UNAVAILABLE_MESSAGE


class TestHelpers:
    def test_build_prompt_only_sends_summary_fields(self):
        program = make_program({"PRUDENTIA": [201]}, name="Quiz", venue="Hall 2")
        prompt = build_prompt([program])
        assert "Quiz" in prompt
        assert "Hall 2" not in prompt
        assert "201" not in prompt

    def test_extract_text_joins_parts(self):
        payload = {"candidates": [{"content": {"parts": [{"text": "One. "}, {"text": "Two."}]}}]}
        assert extract_text(payload) == "One. Two."
        assert extract_text({}) == ""
