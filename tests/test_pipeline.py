"""
End-to-end tests for the query pipeline with a mocked provider endpoint.
"""
import asyncio
import io
import json
from pathlib import Path

import allure
import httpx
import pytest
from rich.console import Console

from aika.config import AppConfig
from aika.errors import AuthError, InputUnavailable, UnknownInput, UnknownPrompt, UnknownProvider
from aika.llm import ProviderRegistry
from aika.pipeline import Pipeline, QueryOptions
from aika.rich_ui import OutputWriter


class FakeAnthropic:
    """Answers Anthropic message requests with a fixed text, streamed or not."""

    def __init__(self, text: str = "feat: add greeting", pieces: int = 3):
        self.text = text
        self.pieces = pieces
        self.bodies: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"data": [{"id": "claude-3-5-sonnet-latest"}]})

        body = json.loads(request.content)
        self.bodies.append(body)

        if not body.get("stream"):
            return httpx.Response(200, json={
                "content": [{"type": "text", "text": self.text}],
                "usage": {"input_tokens": 10, "output_tokens": 4},
            })

        step = max(1, len(self.text) // self.pieces)
        parts = [self.text[i:i + step] for i in range(0, len(self.text), step)]
        events = [
            {"type": "content_block_delta", "delta": {"type": "text_delta", "text": part}}
            for part in parts
        ]
        events.append({"type": "message_stop"})
        content = "".join(f"data: {json.dumps(event)}\n\n" for event in events)
        return httpx.Response(200, content=content.encode())


def console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False, color_system=None, width=200,
                   highlight=False, soft_wrap=True, emoji=False)


def make_pipeline(handler, config: AppConfig = None, out: Console = None) -> Pipeline:
    config = config or AppConfig(credentials={
        "anthropic_api_key": "sk-ant-test",
        "openai_api_key": "sk-test",
    })
    registry = ProviderRegistry(config, transport=httpx.MockTransport(handler))
    return Pipeline(config, registry=registry, writer=OutputWriter(console=out or console()))


@pytest.fixture(autouse=True)
def no_env_keys(monkeypatch):
    for var in ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "MISTRAL_API_KEY"):
        monkeypatch.delenv(var, raising=False)


@allure.feature("Query Pipeline")
@allure.story("Input is substituted into the selected prompt")
@allure.severity(allure.severity_level.CRITICAL)
def test_query_sends_rendered_prompt(tmp_path: Path):
    diff = tmp_path / "change.diff"
    diff.write_text("+print('hello')\n")
    provider = FakeAnthropic()
    out = console()
    pipeline = make_pipeline(provider, out=out)

    result = asyncio.run(pipeline.run_query(QueryOptions(input=f"file:{diff}", prompt="commit-message")))

    assert result == "feat: add greeting"
    assert out.file.getvalue() == "feat: add greeting\n"
    prompt = provider.bodies[0]["messages"][0]["content"]
    assert prompt == (
        "Generate a concise and descriptive git commit message for the "
        "following changes:\n\n```\n+print('hello')\n\n```"
    )


def test_query_without_prompt_sends_input_unchanged():
    provider = FakeAnthropic()
    pipeline = make_pipeline(provider)

    asyncio.run(pipeline.run_query(QueryOptions(input="cmd:printf 'raw text'")))

    assert provider.bodies[0]["messages"] == [{"role": "user", "content": "raw text"}]


def test_query_with_prompt_only_sends_template_with_empty_input():
    config = AppConfig(credentials={"anthropic_api_key": "k"}, prompts={"joke": "Tell a joke{input}"})
    provider = FakeAnthropic()
    pipeline = make_pipeline(provider, config=config)

    asyncio.run(pipeline.run_query(QueryOptions(prompt="joke")))

    assert provider.bodies[0]["messages"][0]["content"] == "Tell a joke"


def test_query_with_neither_input_nor_prompt_fails():
    provider = FakeAnthropic()

    with pytest.raises(InputUnavailable, match="Nothing to send"):
        asyncio.run(make_pipeline(provider).run_query(QueryOptions()))

    assert provider.bodies == []


@allure.feature("Query Pipeline")
@allure.story("Unknown prompt fails before any work")
@allure.severity(allure.severity_level.CRITICAL)
def test_unknown_prompt_makes_no_network_call_and_runs_no_command(tmp_path: Path):
    provider = FakeAnthropic()
    marker = tmp_path / "ran"

    with pytest.raises(UnknownPrompt):
        asyncio.run(make_pipeline(provider).run_query(
            QueryOptions(input=f"cmd:touch {marker}", prompt="does-not-exist")
        ))

    assert provider.bodies == []
    assert not marker.exists()


def test_failing_input_stops_before_request():
    provider = FakeAnthropic()

    with pytest.raises(InputUnavailable):
        asyncio.run(make_pipeline(provider).run_query(QueryOptions(input="cmd:exit 1", prompt="review")))

    assert provider.bodies == []


def test_unknown_named_input_stops_before_request():
    provider = FakeAnthropic()

    with pytest.raises(UnknownInput):
        asyncio.run(make_pipeline(provider).run_query(QueryOptions(input="no-such-input")))

    assert provider.bodies == []


def test_unknown_provider_is_reported():
    with pytest.raises(UnknownProvider):
        asyncio.run(make_pipeline(FakeAnthropic()).run_query(
            QueryOptions(input="cmd:echo x", provider="bard")
        ))


def test_missing_credential_fails_without_request():
    provider = FakeAnthropic()
    pipeline = make_pipeline(provider, config=AppConfig())

    with pytest.raises(AuthError):
        asyncio.run(pipeline.run_query(QueryOptions(input="cmd:echo x")))

    assert provider.bodies == []


@allure.feature("Query Pipeline")
@allure.story("Streaming and non-streaming agree")
@allure.severity(allure.severity_level.CRITICAL)
@pytest.mark.parametrize("text", ["Hello, world", "line one\nline two", "x", ""])
def test_streamed_output_matches_full_output(text: str):
    full_out, stream_out = console(), console()
    full = make_pipeline(FakeAnthropic(text), out=full_out)
    streamed = make_pipeline(FakeAnthropic(text), out=stream_out)

    full_result = asyncio.run(full.run_query(QueryOptions(input="cmd:echo hi")))
    stream_result = asyncio.run(streamed.run_query(QueryOptions(input="cmd:echo hi", stream=True)))

    assert stream_result == full_result == text
    assert stream_out.file.getvalue() == full_out.file.getvalue()


def test_model_option_is_sent():
    provider = FakeAnthropic()

    asyncio.run(make_pipeline(provider).run_query(
        QueryOptions(input="cmd:echo x", model="claude-3-haiku-20240307")
    ))

    assert provider.bodies[0]["model"] == "claude-3-haiku-20240307"


@allure.feature("Query Pipeline")
@allure.story("Model listing")
@allure.severity(allure.severity_level.NORMAL)
def test_list_models_for_one_provider():
    out = console()
    pipeline = make_pipeline(FakeAnthropic(), out=out)

    listed = asyncio.run(pipeline.list_models("claude"))

    assert listed == {"Anthropic": ["claude-3-5-sonnet-latest"]}
    assert "claude-3-5-sonnet-latest" in out.file.getvalue()


def test_list_models_for_all_skips_providers_without_key():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "api.openai.com":
            return httpx.Response(200, json={"data": [{"id": "gpt-4o"}, {"id": "dall-e-3"}]})
        return httpx.Response(200, json={"data": [{"id": "claude-3-5-sonnet-latest"}]})

    listed = asyncio.run(make_pipeline(handler).list_models())

    assert listed == {
        "Anthropic": ["claude-3-5-sonnet-latest"],
        "OpenAI": ["gpt-4o"],
    }


def test_list_models_for_named_provider_without_key_fails():
    with pytest.raises(AuthError):
        asyncio.run(make_pipeline(FakeAnthropic()).list_models("mistral"))
