import os
import sys
import json

import pytest

# Set PYTHONPATH to include src if the package is not installed
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

GOOGLE_ENV_VARS = [
    "GOOGLE_PROJECT", "GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT", "CLOUDSDK_CORE_PROJECT",
    "GOOGLE_REGION", "GCLOUD_REGION", "CLOUDSDK_COMPUTE_REGION",
    "GOOGLE_ZONE", "GCLOUD_ZONE", "CLOUDSDK_COMPUTE_ZONE",
    "GOOGLE_CREDENTIALS", "GOOGLE_CLOUD_KEYFILE_JSON", "GCLOUD_KEYFILE_JSON",
    "GOOGLE_OAUTH_ACCESS_TOKEN", "GOOGLE_APPLICATION_CREDENTIALS",
]


@pytest.fixture(scope="function", autouse=True)
def clear_google_env(request, monkeypatch):
    """Remove Google env vars so unit tests never pick up real credentials."""
    if request.node.get_closest_marker("live"):
        return
    for name in GOOGLE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def usable_subnetworks_response():
    """Two pages of a subnetworks.listUsable response."""
    return [
        {
            "kind": "compute#usableSubnetworksAggregatedList",
            "items": [
                {
                    "subnetwork": "https://www.googleapis.com/compute/v1/projects/proj/regions/us-central1/subnetworks/default",
                    "network": "https://www.googleapis.com/compute/v1/projects/proj/global/networks/default",
                    "ipCidrRange": "10.128.0.0/20",
                    "secondaryIpRanges": [
                        {"rangeName": "pods", "ipCidrRange": "10.4.0.0/14"},
                        {"rangeName": "services", "ipCidrRange": "10.0.32.0/20"},
                    ],
                    "stackType": "IPV4_IPV6",
                    "ipv6AccessType": "EXTERNAL",
                    "purpose": "PRIVATE",
                    "externalIpv6Prefix": "2600:1900:4000:ab12:0:0:0:0/64",
                },
            ],
            "nextPageToken": "page-2",
        },
        {
            "kind": "compute#usableSubnetworksAggregatedList",
            "items": [
                {
                    "subnetwork": "https://www.googleapis.com/compute/v1/projects/proj/regions/europe-west1/subnetworks/proxy-only",
                    "network": "https://www.googleapis.com/compute/v1/projects/proj/global/networks/default",
                    "ipCidrRange": "10.129.0.0/23",
                    "stackType": "IPV4_ONLY",
                    "purpose": "REGIONAL_MANAGED_PROXY",
                    "role": "ACTIVE",
                },
            ],
        },
    ]


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON file under tmp_path and return its path."""
    def _write(name, content):
        path = tmp_path / name
        path.write_text(json.dumps(content))
        return path
    return _write
