"""Stream extraction and catalog normalization for anime hoster pages."""

__version__ = "0.1.0"
