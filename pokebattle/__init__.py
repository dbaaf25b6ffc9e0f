"""PokeBattle - turn-based Pokemon battle sessions as a service."""

__version__ = "0.1.0"
