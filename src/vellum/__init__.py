"""vellum - migrate and import Markdown content collections."""

__version__ = "0.3.0"
