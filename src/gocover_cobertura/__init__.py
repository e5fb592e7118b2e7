"""gocover-cobertura: convert Go coverage profiles to Cobertura XML."""

__version__ = "1.0.0"
