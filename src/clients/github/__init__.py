"""GitHub REST gateway."""

from .client import RepositoryGateway
from .inputs import normalize_config, normalize_path, normalize_ref, normalize_visibility

__all__ = [
    "RepositoryGateway",
    "normalize_config",
    "normalize_path",
    "normalize_ref",
    "normalize_visibility",
]
