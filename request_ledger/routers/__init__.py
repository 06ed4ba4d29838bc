# Routers package

from . import history, service

__all__ = ["history", "service"]
