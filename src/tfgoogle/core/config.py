"""
Provider configuration and Google API client construction.

ProviderConfig is passed explicitly to every data source read (the `meta`
argument in Terraform provider terms). It resolves credentials once and
builds API clients lazily, caching them per instance.

Credential resolution order:
    1. access_token -> google.oauth2.credentials.Credentials
    2. credentials (service account JSON content or path to a key file)
    3. Application Default Credentials (google.auth.default)

Usage:
    config = ProviderConfig(project="my-project", region="us-central1")
    compute = config.compute_client()
    compute.subnetworks().listUsable(project=config.project).execute()
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict

import google.auth
from google.oauth2 import credentials as oauth2_credentials
from google.oauth2 import service_account
from googleapiclient import discovery

from tfgoogle import constants as CONSTANTS
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class ProviderConfig:
    """
    Provider-level settings shared by all data sources.

    Attributes:
        project: Default project used when a data source does not set one
        region: Default region
        zone: Default zone
        credentials: Service account key, either JSON content or a file path
        access_token: OAuth2 access token (takes precedence over credentials)
        scopes: OAuth2 scopes requested for service account / ADC credentials
    """

    project: str = ""
    region: str = ""
    zone: str = ""
    credentials: str = ""
    access_token: str = ""
    scopes: list[str] = field(default_factory=lambda: list(CONSTANTS.DEFAULT_SCOPES))

    _clients: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    _google_credentials: Any = field(default=None, init=False, repr=False)

    def _load_service_account_info(self) -> dict:
        raw = self.credentials.strip()
        if not raw.startswith("{"):
            if not os.path.exists(raw):
                raise ConfigurationError(f"Credentials file not found: {raw}")
            with open(raw, "r", encoding="utf-8") as f:
                raw = f.read()

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Credentials are not valid JSON: {e}")

    def google_credentials(self):
        """
        Resolve the google-auth credentials object for API calls.

        Raises:
            ConfigurationError: If the credentials file is missing or not JSON
            google.auth.exceptions.DefaultCredentialsError: If ADC is not available
        """
        if self._google_credentials is not None:
            return self._google_credentials

        if self.access_token:
            logger.debug("Using OAuth2 access token credentials")
            creds = oauth2_credentials.Credentials(token=self.access_token)
        elif self.credentials:
            logger.debug("Using service account credentials")
            info = self._load_service_account_info()
            creds = service_account.Credentials.from_service_account_info(info, scopes=self.scopes)
        else:
            logger.debug("Using Application Default Credentials")
            creds, _ = google.auth.default(scopes=self.scopes)

        self._google_credentials = creds
        return creds

    def client(self, api_name: str, api_version: str):
        """Discovery client for any Google API, built once per config."""
        key = f"{api_name}/{api_version}"
        if key not in self._clients:
            logger.debug(f"Building {key} API client")
            self._clients[key] = discovery.build(
                api_name,
                api_version,
                credentials=self.google_credentials(),
                cache_discovery=False,
            )
        return self._clients[key]

    def compute_client(self):
        """Compute Engine API client (discovery based)."""
        return self.client(CONSTANTS.COMPUTE_API_NAME, CONSTANTS.COMPUTE_API_VERSION)


def get_project(data, config: ProviderConfig) -> str:
    """
    Resolve the project for a read.

    The data source's own `project` argument wins over the provider default.

    Raises:
        ConfigurationError: If neither is set
    """
    project = data.get("project")
    if project:
        return project
    if config.project:
        return config.project
    raise ConfigurationError("project: required field is not set")
