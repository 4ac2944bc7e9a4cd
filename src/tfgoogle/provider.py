"""
Google provider facade.

GoogleProvider ties a ProviderConfig to the registered data sources and runs
reads the way Terraform drives a provider: validate arguments, read, return
the state plus diagnostics. Errors never escape as exceptions here; they are
reported verbatim as error diagnostics.

Usage:
    provider = GoogleProvider(load_provider_config())
    state, diags = provider.read_data_source(
        "google_compute_usable_subnetworks", {"filter": "name = \"default\""}
    )
    if diags.has_error():
        ...
"""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from tfgoogle import services  # noqa: F401  (registers data sources)
from tfgoogle.core.config import ProviderConfig
from tfgoogle.core.registry import DataSourceRegistry
from tfgoogle.core.schema import Diagnostic, Diagnostics, Resource
from tfgoogle.core.exceptions import ProviderError

logger = logging.getLogger(__name__)


class GoogleProvider:
    """
    Runs data source reads against one provider configuration.

    Attributes:
        config: ProviderConfig passed to every read
    """

    name: str = "google"

    def __init__(self, config: Optional[ProviderConfig] = None):
        self.config = config or ProviderConfig()

    def data_sources(self) -> list[str]:
        return DataSourceRegistry.list_data_sources()

    def data_source(self, name: str) -> Resource:
        return DataSourceRegistry.get(name)

    def read_data_source(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None
    ) -> Tuple[Optional[Dict[str, Any]], Diagnostics]:
        """
        Read a data source.

        Returns:
            (state, diagnostics). state is None when diagnostics contain an error.
        """
        try:
            resource = self.data_source(name)
            data = resource.new_data(arguments)
        except ProviderError as e:
            return None, Diagnostics([Diagnostic.from_error(e)])

        diags = resource.read_data_source(data, self.config)
        if diags.has_error():
            for diag in diags.errors():
                logger.error(f"{name}: {diag.summary}")
            return None, diags

        return data.state(), diags
