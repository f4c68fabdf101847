"""Shakespearean Pokedex: Pokemon descriptions, translated."""

__version__ = "0.1.0"
