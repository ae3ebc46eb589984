"""Third-party secret providers."""
from . import doppler

__all__ = ["doppler"]
