"""Kolibri Bot: relays Kolibri oven activity to Discord."""

__version__ = "0.1.0"
