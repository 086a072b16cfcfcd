"""Gator - a personal RSS feed aggregator for the command line."""

__version__ = "0.1.0"
