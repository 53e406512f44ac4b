"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .author_collections import bp as author_collections_bp  # noqa: E402
from .authors import bp as authors_bp  # noqa: E402
from .books import bp as books_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1
    (authors_bp, "/authors"),
    (books_bp, "/authors/<uuid:author_id>/books"),
    (author_collections_bp, "/authorcollections"),
]
