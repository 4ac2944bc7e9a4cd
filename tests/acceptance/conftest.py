"""
Acceptance test fixtures.

These tests run the Terraform CLI against REAL Google Cloud projects and incur
costs. They are marked `live` and skipped unless TF_ACC is set.

Required environment:
    TF_ACC=1
    GOOGLE_PROJECT (or GOOGLE_CLOUD_PROJECT / GCLOUD_PROJECT / CLOUDSDK_CORE_PROJECT)
    Credentials Terraform and google-auth can both find (GOOGLE_CREDENTIALS,
    GOOGLE_APPLICATION_CREDENTIALS or gcloud application-default login)
"""

import shutil

import pytest

from tfgoogle.acctest.harness import acc_test_enabled, acc_test_pre_check, random_suffix
from tfgoogle.core.config_loader import load_provider_config


def pytest_collection_modifyitems(config, items):
    if acc_test_enabled():
        return
    skip = pytest.mark.skip(reason="Acceptance tests skipped unless env 'TF_ACC' set")
    for item in items:
        if item.get_closest_marker("live"):
            item.add_marker(skip)


@pytest.fixture(scope="session")
def acc_project():
    """Project acceptance resources are created in."""
    if shutil.which("terraform") is None:
        pytest.fail("terraform binary not found on PATH")
    return acc_test_pre_check()


@pytest.fixture(scope="session")
def provider_config(acc_project):
    """ProviderConfig used to look up resources outside Terraform (destroy checks)."""
    return load_provider_config(project=acc_project)


@pytest.fixture
def suffix():
    return random_suffix()
