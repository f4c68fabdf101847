import logging

from poke_shakespeare.cache import ResponseCache
from poke_shakespeare.clients.errors import UpstreamError
from poke_shakespeare.clients.pokeapi_client import SpeciesLookup
from poke_shakespeare.clients.translation_client import StyleTransformer
from poke_shakespeare.models import LookupFailure, LookupRequest, OrchestrationResult, Translation

logger = logging.getLogger(__name__)


class PokemonService:
    # Clients and cache are owned by the caller and injected here
    def __init__(
        self,
        species_client: SpeciesLookup,
        transformer: StyleTransformer,
        cache: ResponseCache | None = None,
    ):
        self._species_client = species_client
        self._transformer = transformer
        self._cache = cache

    async def describe(self, request: LookupRequest, bypass_cache: bool = False) -> OrchestrationResult:
        """
        Looks up the species description and rewrites it in Shakespearean English.

        One attempt per call: the first upstream failure is returned as a
        LookupFailure, nothing is retried and nothing is cached. With
        bypass_cache the cached entry is ignored but a fresh success still
        replaces it.
        """
        name = request.name

        if self._cache is not None and not bypass_cache:
            entry = await self._cache.get(name)
            if entry is not None:
                logger.info(f"Cache hit for Pokemon: {name}")
                return Translation(name=entry.name, description=entry.description, cached=True)
            logger.info(f"Cache miss for Pokemon: {name}")

        try:
            description = await self._species_client.fetch(name)
            # The transformer is only reached when the lookup succeeded
            translated = await self._transformer.transform(description)
        except UpstreamError as e:
            logger.warning(f"Lookup for {name} failed ({e.kind.value}): {e.detail}")
            return LookupFailure(name=name, kind=e.kind)

        if self._cache is not None:
            await self._cache.put(name, translated)
        return Translation(name=name, description=translated)

    async def close(self):
        """Release the clients and the cache (call on app shutdown)."""
        await self._species_client.close()
        await self._transformer.close()
        if self._cache is not None:
            await self._cache.close()
