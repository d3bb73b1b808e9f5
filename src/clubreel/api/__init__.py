"""Backend collaborator client."""

from .client import ApiError, ClubApiClient

__all__ = ["ApiError", "ClubApiClient"]
