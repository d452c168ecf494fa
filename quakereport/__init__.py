"""Quake Report - fetch, parse and format USGS earthquake feeds."""

__version__ = "0.1.0"
