"""trustyPCS site settings service."""

__version__ = "1.0.0"
