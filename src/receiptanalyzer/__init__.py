"""Receipt analyzer: vision-model receipt categorization API."""

__version__ = "0.1.0"
