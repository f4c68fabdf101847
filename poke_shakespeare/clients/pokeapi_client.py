import asyncio
import logging
from typing import Mapping, Protocol

import httpx

from poke_shakespeare.clients.errors import SpeciesNotFound, UpstreamTimeout, UpstreamUnavailable
from poke_shakespeare.models import normalize_name

logger = logging.getLogger(__name__)


class SpeciesLookup(Protocol):
    async def fetch(self, name: str) -> str:
        """Returns the English description of a species or raises an UpstreamError."""
        ...

    async def close(self) -> None:
        ...


class PokeAPIClient:
    BASE_URL = "https://pokeapi.co/api/v2"

    def __init__(self, base_url: str = BASE_URL, timeout: float = 5.0):
        self.timeout = timeout
        self.client = httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def _fetch_species_data(self, name: str) -> dict:
        """Internal method to fetch raw species data and map transport failures."""
        url = f"/pokemon-species/{name}"

        try:
            # httpx bounds each phase; wait_for bounds the whole call
            response = await asyncio.wait_for(self.client.get(url), timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise SpeciesNotFound(f"Pokemon '{name}' not found.")
            raise UpstreamUnavailable(f"PokeAPI failed with status {e.response.status_code}")
        except (httpx.TimeoutException, asyncio.TimeoutError):
            raise UpstreamTimeout(f"PokeAPI did not answer within {self.timeout}s")
        except httpx.RequestError as e:
            raise UpstreamUnavailable(f"PokeAPI network error: {e}")
        except ValueError:
            raise UpstreamUnavailable("PokeAPI responded with invalid JSON")

    async def fetch(self, name: str) -> str:
        """Fetches the species record and extracts its first English flavor text."""
        data = await self._fetch_species_data(name)

        try:
            description = next(
                (
                    # Clean up newlines/form feeds
                    " ".join(entry["flavor_text"].split())
                    for entry in data["flavor_text_entries"]
                    if entry["language"]["name"] == "en"
                ),
                None,
            )
        except (KeyError, TypeError, AttributeError):
            # Missing keys, or a flavor_text that is not a string
            raise UpstreamUnavailable("PokeAPI returned an unexpected response format")

        if not description:
            logger.warning(f"Pokemon {name} has no english flavor text available")
            raise SpeciesNotFound(f"Pokemon '{name}' has no English description.")
        return description

    async def close(self):
        """Close the HTTP connection pool (call on app shutdown)."""
        await self.client.aclose()


class StaticSpeciesLookup:
    """Answers lookups from a fixed name -> description table, for offline development."""

    def __init__(self, descriptions: Mapping[str, str]):
        self._descriptions = {normalize_name(k): v for k, v in descriptions.items()}

    async def fetch(self, name: str) -> str:
        description = self._descriptions.get(normalize_name(name), "").strip()
        if not description:
            raise SpeciesNotFound(f"Pokemon '{name}' not found in static table.")
        return description

    async def close(self):
        pass
