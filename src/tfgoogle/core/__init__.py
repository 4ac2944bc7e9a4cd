"""
Core abstractions for the Google Cloud provider layer.

Modules:
    schema: Schema / Resource / ResourceData / Diagnostics
    config: ProviderConfig and API client construction
    config_loader: Configuration loading from file and environment
    registry: DataSourceRegistry for lookup by Terraform type name
    exceptions: Custom exception types
"""

from .schema import Diagnostic, Diagnostics, Resource, ResourceData, Schema, SchemaType, Severity
from .config import ProviderConfig, get_project
from .registry import DataSourceRegistry
from .exceptions import (
    AcceptanceTestError,
    ConfigurationError,
    DataSourceNotFoundError,
    ProviderError,
    StateError,
    TemplateRenderError,
)

__all__ = [
    # Schema
    "Diagnostic",
    "Diagnostics",
    "Resource",
    "ResourceData",
    "Schema",
    "SchemaType",
    "Severity",
    # Config
    "ProviderConfig",
    "get_project",
    # Registry
    "DataSourceRegistry",
    # Exceptions
    "AcceptanceTestError",
    "ConfigurationError",
    "DataSourceNotFoundError",
    "ProviderError",
    "StateError",
    "TemplateRenderError",
]
