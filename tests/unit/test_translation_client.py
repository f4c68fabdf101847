import asyncio

import pytest
import httpx
from poke_shakespeare.clients.translation_client import MockTranslationClient, TranslationClient
from poke_shakespeare.clients.errors import RateLimited, UpstreamTimeout, UpstreamUnavailable
from poke_shakespeare.models import ErrorKind


MOCK_TRANSLATION_SUCCESS = {
    "success": {"total": 1},
    "contents": {
        "translated": "Thee did giveth mr. Tim a hearty meal.",
        "text": "You gave Mr. Tim a hearty meal.",
        "translation": "shakespeare"
    }
}

@pytest.fixture
def translation_client():
    return TranslationClient()

@pytest.mark.asyncio
async def test_successful_shakespeare_translation(httpx_mock, translation_client):
    """Verifies successful API call and correct extraction of the translated text."""
    # ARRANGE: the source text is sent as the JSON body
    httpx_mock.add_response(
        url="https://api.funtranslations.com/translate/shakespeare",
        method="POST",
        match_json={"text": "You gave Mr. Tim a hearty meal."},
        json=MOCK_TRANSLATION_SUCCESS,
        status_code=200
    )

    # ACT
    result = await translation_client.transform("You gave Mr. Tim a hearty meal.")

    # ASSERT: Check that only the translated text is returned
    assert result == "Thee did giveth mr. Tim a hearty meal."


@pytest.mark.asyncio
async def test_api_rate_limit_raises_rate_limited(httpx_mock, translation_client):
    """Tests that a 429 from the external API is a distinct RateLimited failure."""
    httpx_mock.add_response(
        url="https://api.funtranslations.com/translate/shakespeare",
        status_code=429,
        json={"error": {"code": 429, "message": "Too Many Requests"}}
    )

    with pytest.raises(RateLimited) as excinfo:
        await translation_client.transform("To be or not to be.")

    assert excinfo.value.kind is ErrorKind.RATE_LIMITED
    assert "rate limit" in excinfo.value.detail.lower()


@pytest.mark.asyncio
async def test_api_server_error_raises_unavailable(httpx_mock, translation_client):
    httpx_mock.add_response(
        url="https://api.funtranslations.com/translate/shakespeare",
        status_code=503,
    )

    with pytest.raises(UpstreamUnavailable) as excinfo:
        await translation_client.transform("To be or not to be.")

    assert "503" in excinfo.value.detail


@pytest.mark.asyncio
async def test_api_network_error_raises_unavailable(httpx_mock, translation_client):
    """Tests that a network failure (DNS error, refused connection) is UpstreamUnavailable."""
    httpx_mock.add_exception(
        httpx.ConnectError("Connection refused."),
        url="https://api.funtranslations.com/translate/shakespeare"
    )

    with pytest.raises(UpstreamUnavailable) as excinfo:
        await translation_client.transform("Test.")

    assert "network error" in excinfo.value.detail.lower()


@pytest.mark.asyncio
async def test_api_timeout_raises_timeout(httpx_mock, translation_client):
    httpx_mock.add_exception(
        httpx.ReadTimeout("Read timed out."),
        url="https://api.funtranslations.com/translate/shakespeare"
    )

    with pytest.raises(UpstreamTimeout):
        await translation_client.transform("Test.")


@pytest.mark.asyncio
async def test_unexpected_response_format_raises_unavailable(httpx_mock, translation_client):
    httpx_mock.add_response(
        url="https://api.funtranslations.com/translate/shakespeare",
        json={"success": {"total": 1}},
    )

    with pytest.raises(UpstreamUnavailable) as excinfo:
        await translation_client.transform("Test.")

    assert "unexpected response format" in excinfo.value.detail


@pytest.mark.asyncio
async def test_api_key_is_sent_as_header(httpx_mock):
    client = TranslationClient(api_key="s3cret")
    httpx_mock.add_response(
        url="https://api.funtranslations.com/translate/shakespeare",
        match_headers={"X-FunTranslations-Api-Secret": "s3cret"},
        json=MOCK_TRANSLATION_SUCCESS,
    )

    await client.transform("You gave Mr. Tim a hearty meal.")
    await client.close()


@pytest.mark.asyncio
async def test_configured_style_selects_endpoint(httpx_mock):
    client = TranslationClient(style="yoda")
    httpx_mock.add_response(
        url="https://api.funtranslations.com/translate/yoda",
        json={"contents": {"translated": "Speak, Yoda does."}},
    )

    assert await client.transform("Yoda speaks.") == "Speak, Yoda does."
    await client.close()


# --- MOCK MODE ---

@pytest.mark.asyncio
async def test_mock_translation_of_sample_description():
    result = await MockTranslationClient().transform("This is its final form.")

    assert result == "This be its final form, by my troth."


@pytest.mark.asyncio
async def test_mock_translation_is_deterministic():
    translator = MockTranslationClient()
    text = "When it is angry, it\nimmediately discharges the energy stored in the pouches in its cheeks."

    first = await translator.transform(text)
    second = await translator.transform(text)

    assert first == second
    assert "\n" not in first
    assert first.endswith(", by my troth.")


@pytest.mark.asyncio
async def test_mock_translation_preserves_capitalization():
    result = await MockTranslationClient().transform("You are brave. Your heart has fire!")

    assert result == "Thee art brave. Thy heart hath fire, by my troth."


@pytest.mark.asyncio
async def test_mock_translation_leaves_blank_text_alone():
    assert await MockTranslationClient().transform("") == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("translated", [None, 42, {"text": "Hark."}])
async def test_non_string_translation_raises_unavailable(httpx_mock, translation_client, translated):
    httpx_mock.add_response(
        url="https://api.funtranslations.com/translate/shakespeare",
        json={"contents": {"translated": translated}},
    )

    with pytest.raises(UpstreamUnavailable) as excinfo:
        await translation_client.transform("Test.")

    assert "unexpected response format" in excinfo.value.detail


@pytest.mark.asyncio
async def test_slow_translation_hits_call_deadline(httpx_mock):
    """The per-call deadline fires even when the transport never times out on its own."""
    client = TranslationClient(timeout=0.1)

    async def never_in_time(request):
        await asyncio.sleep(1)
        return httpx.Response(status_code=200, json=MOCK_TRANSLATION_SUCCESS)

    httpx_mock.add_callback(never_in_time, url="https://api.funtranslations.com/translate/shakespeare")

    with pytest.raises(UpstreamTimeout):
        await client.transform("Test.")
    await client.close()
