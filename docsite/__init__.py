"""Static documentation site generator for extracted TypeScript API data."""

__version__ = "0.1.0"
