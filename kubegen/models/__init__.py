"""Data models for kubegen."""
from kubegen.models.deploy import (
    CommandInfo,
    GenerateConfig,
    RouteInfo,
    derive_resource_name,
    normalize_path,
)

__all__ = [
    'CommandInfo',
    'GenerateConfig',
    'RouteInfo',
    'derive_resource_name',
    'normalize_path',
]
