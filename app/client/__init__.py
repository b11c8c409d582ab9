"""Cached API client used by front ends and scripts."""

from .api_client import INVALIDATIONS, ApiError, QueryCache, TrainingApiClient

__all__ = ["ApiError", "INVALIDATIONS", "QueryCache", "TrainingApiClient"]
