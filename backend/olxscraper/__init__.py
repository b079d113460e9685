"""Unofficial OLX.pl scraper: paced retrieval, dual-path parsing, search aggregation."""

__version__ = "1.0.0"
