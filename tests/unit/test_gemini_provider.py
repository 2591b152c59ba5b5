from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors

from rakugaki.domain.errors import ModelError
from rakugaki.infrastructure.llm.gemini_provider import GeminiVisionModel, GenerationParams


class _FakeModels:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return SimpleNamespace(text=self.outcome)


class _FakeAio:
    def __init__(self, models: _FakeModels):
        self.models = models
        self.closed = False

    async def aclose(self):
        self.closed = True


def _client(outcome):
    models = _FakeModels(outcome)
    return SimpleNamespace(aio=_FakeAio(models)), models


async def _generate(model: GeminiVisionModel) -> str:
    return await model.generate(
        image=b"\x89PNG",
        mime_type="image/png",
        prompt="Critique this.",
        system="You are a critic.",
        params=GenerationParams(temperature=0.5, top_k=12),
    )


@pytest.mark.asyncio
async def test_generate_sends_image_prompt_and_config():
    client, models = _client('{"title": "ok"}')
    model = GeminiVisionModel(model="gemini-test", client=client)

    text = await _generate(model)

    assert text == '{"title": "ok"}'
    call = models.calls[0]
    assert call["model"] == "gemini-test"
    assert len(call["contents"]) == 2
    assert call["contents"][1].text == "Critique this."
    assert call["config"].system_instruction == "You are a critic."
    assert call["config"].temperature == 0.5
    assert call["config"].top_k == 12
    assert call["config"].max_output_tokens == 2048


@pytest.mark.asyncio
async def test_empty_response_text_becomes_empty_string():
    client, _ = _client(None)

    assert await _generate(GeminiVisionModel(client=client)) == ""


@pytest.mark.asyncio
async def test_429_maps_to_rate_limit():
    error = genai_errors.ClientError(
        429, {"error": {"code": 429, "message": "Resource exhausted", "status": "RESOURCE_EXHAUSTED"}}
    )
    client, _ = _client(error)

    with pytest.raises(ModelError) as exc_info:
        await _generate(GeminiVisionModel(client=client))

    assert exc_info.value.code == "RATE_LIMIT"
    assert exc_info.value.cause is error


@pytest.mark.asyncio
async def test_other_api_errors_map_to_api_error():
    error = genai_errors.ServerError(
        503, {"error": {"code": 503, "message": "Unavailable", "status": "UNAVAILABLE"}}
    )
    client, _ = _client(error)

    with pytest.raises(ModelError) as exc_info:
        await _generate(GeminiVisionModel(client=client))

    assert exc_info.value.code == "API_ERROR"


@pytest.mark.asyncio
async def test_missing_api_key_is_an_api_error():
    with pytest.raises(ModelError) as exc_info:
        await _generate(GeminiVisionModel(api_key=None))

    assert exc_info.value.code == "API_ERROR"
    assert "GEMINI_API_KEY" in str(exc_info.value)


@pytest.mark.asyncio
async def test_close_releases_async_client():
    client, _ = _client("")
    model = GeminiVisionModel(client=client)

    await model.close()

    assert client.aio.closed
