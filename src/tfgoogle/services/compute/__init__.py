"""
Compute Engine data sources.

Auto-registers with DataSourceRegistry on import.
"""

from tfgoogle.core.registry import DataSourceRegistry
from .data_source_compute_usable_subnetworks import (
    DATA_SOURCE_NAME as USABLE_SUBNETWORKS,
    data_source_google_compute_usable_subnetworks,
)

DataSourceRegistry.register(USABLE_SUBNETWORKS, data_source_google_compute_usable_subnetworks)

__all__ = ["data_source_google_compute_usable_subnetworks"]
