"""Farm inventory service: a FastAPI REST API for farm parts and supplies backed by MongoDB."""

__version__ = "1.0.0"
