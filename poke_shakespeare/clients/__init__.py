"""Client modules for external API communication."""
from .errors import RateLimited, SpeciesNotFound, UpstreamError, UpstreamTimeout, UpstreamUnavailable
from .pokeapi_client import PokeAPIClient, SpeciesLookup, StaticSpeciesLookup
from .translation_client import MockTranslationClient, StyleTransformer, TranslationClient

__all__ = [
    'PokeAPIClient',
    'StaticSpeciesLookup',
    'SpeciesLookup',
    'TranslationClient',
    'MockTranslationClient',
    'StyleTransformer',
    'UpstreamError',
    'SpeciesNotFound',
    'UpstreamUnavailable',
    'RateLimited',
    'UpstreamTimeout',
]
