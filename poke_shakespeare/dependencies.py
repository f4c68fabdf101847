import logging

from fastapi import HTTPException, Request, status
from pydantic import ValidationError

from poke_shakespeare.cache import InMemoryResponseCache, RedisResponseCache, ResponseCache
from poke_shakespeare.clients import (
    MockTranslationClient,
    PokeAPIClient,
    SpeciesLookup,
    StaticSpeciesLookup,
    StyleTransformer,
    TranslationClient,
)
from poke_shakespeare.config import Settings
from poke_shakespeare.models import LookupRequest
from poke_shakespeare.services import PokemonService

logger = logging.getLogger(__name__)


def build_species_client(settings: Settings) -> SpeciesLookup:
    if settings.pokeapi_mock is not None:
        logger.info(f"Using static species table with {len(settings.pokeapi_mock)} entries")
        return StaticSpeciesLookup(settings.pokeapi_mock)
    return PokeAPIClient(base_url=settings.pokeapi_url, timeout=settings.pokeapi_timeout)


def build_transformer(settings: Settings) -> StyleTransformer:
    # Chosen once per deployment, never per request
    if settings.translator_mock:
        logger.info("Translator mock mode enabled, Fun Translations will not be called")
        return MockTranslationClient()
    return TranslationClient(
        base_url=settings.translator_url,
        style=settings.translation_style,
        timeout=settings.translator_timeout,
        api_key=settings.translator_api_key,
    )


def build_cache(settings: Settings) -> ResponseCache | None:
    if settings.cache_backend == "redis":
        return RedisResponseCache(redis_url=settings.redis_url, ttl=settings.cache_ttl)
    if settings.cache_backend == "memory":
        return InMemoryResponseCache(ttl=settings.cache_ttl, capacity=settings.cache_capacity)
    return None


def build_pokemon_service(settings: Settings) -> PokemonService:
    return PokemonService(
        species_client=build_species_client(settings),
        transformer=build_transformer(settings),
        cache=build_cache(settings),
    )


def get_pokemon_service(request: Request) -> PokemonService:
    """The service instance is created in the app lifespan and lives on app.state."""
    return request.app.state.pokemon_service


def get_lookup_request(name: str) -> LookupRequest:
    try:
        return LookupRequest(name=name)
    except ValidationError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid_name")
