"""
Data source registry for lookup by Terraform type name.

Design Pattern: Registry Pattern
    - Service packages register their data sources when imported
    - Lookup is done by Terraform type name (e.g. "google_compute_usable_subnetworks")
    - The provider, the CLI and the docs generator all enumerate the registry

How Registration Works:
    Each service package (e.g. services/compute/__init__.py) registers a
    factory returning the data source's Resource description:

        from tfgoogle.core.registry import DataSourceRegistry
        from .data_source_compute_usable_subnetworks import data_source_google_compute_usable_subnetworks
        DataSourceRegistry.register(
            "google_compute_usable_subnetworks",
            data_source_google_compute_usable_subnetworks,
        )

    tfgoogle.services imports every service package to trigger registration.
"""

from typing import Callable, Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from .schema import Resource

from .exceptions import DataSourceNotFoundError


class DataSourceRegistry:
    """
    Central registry for data source factories.

    Class-level state: registration happens at import time, before any
    provider instance exists.
    """

    _data_sources: Dict[str, Callable[[], 'Resource']] = {}

    @classmethod
    def register(cls, name: str, factory: Callable[[], 'Resource']) -> None:
        """
        Register a data source factory under a name.

        Registering the same factory twice is allowed; a different factory
        for an existing name raises.

        Raises:
            ValueError: If name is already registered with a different factory
        """
        if name in cls._data_sources:
            existing = cls._data_sources[name]
            if existing is not factory:
                raise ValueError(
                    f"Data source '{name}' is already registered with {existing.__name__}. "
                    f"Cannot re-register with {factory.__name__}."
                )
            return

        cls._data_sources[name] = factory

    @classmethod
    def get(cls, name: str) -> 'Resource':
        """
        Build the Resource description for the named data source.

        Raises:
            DataSourceNotFoundError: If no data source is registered with that name.
        """
        if name not in cls._data_sources:
            raise DataSourceNotFoundError(name, cls.list_data_sources())

        return cls._data_sources[name]()

    @classmethod
    def list_data_sources(cls) -> list[str]:
        """Registered names, sorted alphabetically."""
        return sorted(cls._data_sources.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._data_sources

    @classmethod
    def clear(cls) -> None:
        """
        Clear all registered data sources.

        Used by tests to reset state between tests.
        """
        cls._data_sources.clear()
