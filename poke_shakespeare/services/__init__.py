from .pokemon_service import PokemonService

__all__ = ['PokemonService']
