import asyncio
import logging
import re
from typing import Protocol

import httpx

from poke_shakespeare.clients.errors import RateLimited, UpstreamTimeout, UpstreamUnavailable

logger = logging.getLogger(__name__)


class StyleTransformer(Protocol):
    async def transform(self, text: str) -> str:
        """Returns the stylized text or raises an UpstreamError."""
        ...

    async def close(self) -> None:
        ...


class TranslationClient:
    BASE_URL = "https://api.funtranslations.com/translate"
    API_KEY_HEADER = "X-FunTranslations-Api-Secret"

    def __init__(
        self,
        base_url: str = BASE_URL,
        style: str = "shakespeare",
        timeout: float = 5.0,
        api_key: str | None = None,
    ):
        self.style = style
        self.timeout = timeout
        # Unauthenticated calls share the public (strict) quota
        headers = {self.API_KEY_HEADER: api_key} if api_key else None
        self.client = httpx.AsyncClient(base_url=base_url, timeout=timeout, headers=headers)

    async def transform(self, text: str) -> str:
        """Performs the actual network call and error handling."""
        url = f"/{self.style}"

        try:
            response = await asyncio.wait_for(
                self.client.post(url=url, json={"text": text}), timeout=self.timeout
            )
            response.raise_for_status()

            data = response.json()
            translated = data["contents"]["translated"]
            if not isinstance(translated, str):
                raise TypeError(f"translated is {type(translated).__name__}, expected str")
            return translated

        except httpx.HTTPStatusError as e:
            if e.response.status_code == 429:
                logger.warning("Translation API rate limit exceeded.")
                raise RateLimited("Translation API rate limit exceeded.")
            detail = f"Translation API failed with status {e.response.status_code}."
            logger.error(f"Translation API error: {detail}")
            raise UpstreamUnavailable(detail)

        except (httpx.TimeoutException, asyncio.TimeoutError):
            logger.error(f"Translation API did not answer within {self.timeout}s")
            raise UpstreamTimeout(f"Translation API did not answer within {self.timeout}s")

        except httpx.RequestError as e:
            logger.error(f"Translation API network error: {str(e)}")
            raise UpstreamUnavailable(f"Translation API network error: {str(e)}")

        except (ValueError, KeyError, TypeError):
            logger.error("Translation API response parsing error.")
            raise UpstreamUnavailable("Translation API returned an unexpected response format.")

    async def close(self):
        """Close the HTTP connection pool (call on app shutdown)."""
        await self.client.aclose()


_WORD = re.compile(r"[A-Za-z']+")

_ARCHAISMS = {
    "is": "be",
    "are": "art",
    "you": "thee",
    "your": "thy",
    "yours": "thine",
    "has": "hath",
    "does": "doth",
    "it's": "'tis",
    "before": "ere",
    "often": "oft",
    "here": "hither",
    "there": "thither",
    "why": "wherefore",
    "yes": "aye",
}


def _archaize(match: re.Match) -> str:
    word = match.group(0)
    replacement = _ARCHAISMS.get(word.lower())
    if replacement is None:
        return word
    if word[0].isupper():
        return replacement[0].upper() + replacement[1:]
    return replacement


class MockTranslationClient:
    """Deterministic local stand-in for the Fun Translations API.

    Swaps a handful of words for their Early Modern English forms and closes
    the text with a fixed flourish, so the same input always yields the same
    output without spending the real service's quota.
    """

    SUFFIX = ", by my troth."

    async def transform(self, text: str) -> str:
        text = _WORD.sub(_archaize, " ".join(text.split()))
        body = text.rstrip(".!?;:, ")
        if not body:
            return text
        return body + self.SUFFIX

    async def close(self):
        pass
