"""Terminal text browser: pages distilled into numbered, tabbed text."""

__version__ = "0.2.0"
