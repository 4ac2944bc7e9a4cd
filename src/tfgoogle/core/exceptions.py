"""
Custom exceptions for the Google Cloud provider layer.

Exception Hierarchy:
    ProviderError (base)
    ├── ConfigurationError - Invalid or missing provider configuration / arguments
    ├── DataSourceNotFoundError - Unknown data source name requested
    ├── StateError - Value does not fit the data source schema
    ├── TemplateRenderError - Example template missing or variable undefined
    └── AcceptanceTestError - An acceptance test step did not behave as expected

Errors returned by the Google API client (googleapiclient.errors.HttpError)
are not part of this hierarchy: they are surfaced unchanged.
"""

from typing import Optional


class ProviderError(Exception):
    """
    Base exception for all provider-related errors.

    Attributes:
        message: Human-readable error description
        resource: Optional data source / resource type where the error occurred
    """

    def __init__(self, message: str, resource: Optional[str] = None):
        self.message = message
        self.resource = resource

        if resource:
            full_message = f"{message} [resource={resource}]"
        else:
            full_message = message

        super().__init__(full_message)


class ConfigurationError(ProviderError):
    """
    Raised when provider configuration or data source arguments are invalid.

    This typically occurs when:
    - config_credentials.json is missing (when given explicitly) or has invalid JSON
    - No project can be resolved for a read
    - An argument is unknown, computed-only, or a required one is missing

    Example:
        >>> load_provider_config("nonexistent.json")
        ConfigurationError: Config file not found (file: nonexistent.json)
    """

    def __init__(self, message: str, config_file: Optional[str] = None, resource: Optional[str] = None):
        self.config_file = config_file
        if config_file:
            message = f"{message} (file: {config_file})"
        super().__init__(message, resource=resource)


class DataSourceNotFoundError(ProviderError):
    """
    Raised when an unknown data source name is requested.

    Example:
        >>> DataSourceRegistry.get("google_compute_unknown")
        DataSourceNotFoundError: Data source 'google_compute_unknown' not found.
        Available: ['google_compute_usable_subnetworks']
    """

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        message = (
            f"Data source '{name}' not found. "
            f"Available: {available}"
        )
        super().__init__(message)


class StateError(ProviderError):
    """Raised when a value written into ResourceData does not match the schema."""

    def __init__(self, key: str, message: str, resource: Optional[str] = None):
        self.key = key
        super().__init__(f"Invalid value for '{key}': {message}", resource=resource)


class TemplateRenderError(ProviderError):
    """Raised when an example or test template cannot be rendered."""

    def __init__(self, template: str, message: str):
        self.template = template
        super().__init__(f"Failed to render template '{template}': {message}")


class AcceptanceTestError(ProviderError):
    """
    Raised when an acceptance test step fails.

    Attributes:
        step: 1-based index of the failing step (None for harness-level errors)
    """

    def __init__(self, message: str, step: Optional[int] = None):
        self.step = step
        if step is not None:
            message = f"Step {step}: {message}"
        super().__init__(message)
