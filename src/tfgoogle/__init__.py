"""
tfgoogle - Terraform data sources, examples and acceptance tooling for Google Cloud.

Packages:
    core: Schema description, provider configuration, registry, exceptions
    services: Data source implementations grouped by Google Cloud service
    examples: Templated .tf example configurations
    acctest: Acceptance-test harness driving the Terraform CLI

Usage:
    from tfgoogle.core.config_loader import load_provider_config
    from tfgoogle.provider import GoogleProvider

    provider = GoogleProvider(load_provider_config())
    state, diags = provider.read_data_source(
        "google_compute_usable_subnetworks", {"project": "my-project"}
    )
"""

__version__ = "0.1.0"
