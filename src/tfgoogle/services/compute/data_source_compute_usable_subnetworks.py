"""
google_compute_usable_subnetworks data source.

Lists the subnetworks a project is permitted to use (Compute
subnetworks.listUsable) and reshapes every API item into a schema map.

The id is synthetic: "{project}-{filter}", with "ALL" standing in for an
empty filter.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from tfgoogle import constants as CONSTANTS
from tfgoogle.core.config import ProviderConfig, get_project
from tfgoogle.core.schema import Resource, ResourceData, Schema, SchemaType

logger = logging.getLogger(__name__)

DATA_SOURCE_NAME = "google_compute_usable_subnetworks"


def _computed_string(description: str) -> Schema:
    return Schema(SchemaType.STRING, description=description, computed=True)


def data_source_google_compute_usable_subnetworks() -> Resource:
    secondary_ip_range = Resource(
        schema={
            "range_name": _computed_string("The name associated with this subnetwork secondary range."),
            "ip_cidr_range": _computed_string("The range of IP addresses belonging to this subnetwork secondary range."),
        }
    )

    usable_subnetwork = Resource(
        schema={
            "subnetwork": _computed_string("Subnetwork URL."),
            "ip_cidr_range": _computed_string("The range of internal addresses that are owned by this subnetwork."),
            "network": _computed_string("Network URL."),
            "secondary_ip_ranges": Schema(
                SchemaType.LIST,
                description="Secondary IP ranges.",
                computed=True,
                elem=secondary_ip_range,
            ),
            "stack_type": _computed_string(
                "The stack type for the subnet. Possible values are: IPV4_ONLY, IPV4_IPV6, IPV6_ONLY."
            ),
            "ipv6_access_type": _computed_string(
                "The access type of IPv6 address this subnet holds. Possible values are: EXTERNAL, INTERNAL."
            ),
            "purpose": _computed_string("The purpose of the resource."),
            "role": _computed_string(
                "The role of subnetwork. Only used for REGIONAL_MANAGED_PROXY purpose. "
                "Possible values are: ACTIVE, BACKUP."
            ),
            "external_ipv6_prefix": _computed_string("The external IPv6 address range that is assigned to this subnetwork."),
            "internal_ipv6_prefix": _computed_string("The internal IPv6 address range that is assigned to this subnetwork."),
        }
    )

    return Resource(
        name=DATA_SOURCE_NAME,
        description="Get usable subnetworks in a project, as reported by the Compute subnetworks.listUsable API.",
        read=data_source_google_compute_usable_subnetworks_read,
        schema={
            "filter": Schema(
                SchemaType.STRING,
                description="A filter expression that filters resources listed in the response, "
                            "e.g. `name = \"my-subnet\"`.",
                optional=True,
            ),
            "project": Schema(
                SchemaType.STRING,
                description="The ID of the project. If it is not provided, the provider project is used.",
                optional=True,
                computed=True,
            ),
            "subnetworks": Schema(
                SchemaType.LIST,
                description="A list of usable subnetworks.",
                computed=True,
                elem=usable_subnetwork,
            ),
        },
    )


def usable_subnetworks_id(project: str, filter_: Optional[str]) -> str:
    return f"{project}-{filter_ or CONSTANTS.ALL_FILTER_ID}"


def flatten_secondary_ip_ranges(ranges: Optional[List[Dict[str, Any]]]) -> List[Dict[str, str]]:
    return [
        {
            "range_name": secondary.get("rangeName", ""),
            "ip_cidr_range": secondary.get("ipCidrRange", ""),
        }
        for secondary in ranges or []
    ]


def flatten_usable_subnetwork(item: Dict[str, Any]) -> Dict[str, Any]:
    """Map one listUsable API item onto the usable subnetwork schema."""
    return {
        "subnetwork": item.get("subnetwork", ""),
        "ip_cidr_range": item.get("ipCidrRange", ""),
        "network": item.get("network", ""),
        "secondary_ip_ranges": flatten_secondary_ip_ranges(item.get("secondaryIpRanges")),
        "stack_type": item.get("stackType", ""),
        "ipv6_access_type": item.get("ipv6AccessType", ""),
        "purpose": item.get("purpose", ""),
        "role": item.get("role", ""),
        "external_ipv6_prefix": item.get("externalIpv6Prefix", ""),
        "internal_ipv6_prefix": item.get("internalIpv6Prefix", ""),
    }


def list_usable_subnetworks(client, project: str, filter_: Optional[str] = None) -> Iterator[Dict[str, Any]]:
    """
    Page through subnetworks.listUsable, yielding raw API items in order.

    Args:
        client: Compute API client (googleapiclient discovery resource)
        project: Project to list usable subnetworks for
        filter_: Optional filter expression, only sent when non-empty

    Raises:
        googleapiclient.errors.HttpError: Propagated unchanged from any page
    """
    page_token = None
    pages = 0
    while True:
        params = {"project": project}
        if filter_:
            params["filter"] = filter_
        if page_token:
            params["pageToken"] = page_token

        result = client.subnetworks().listUsable(**params).execute()
        pages += 1

        for item in result.get("items", []):
            yield item

        page_token = result.get("nextPageToken")
        if not page_token:
            break

    logger.debug(f"listUsable returned {pages} page(s) for project {project}")


def data_source_google_compute_usable_subnetworks_read(data: ResourceData, config: ProviderConfig) -> None:
    project = get_project(data, config)
    filter_ = data.get("filter")

    logger.info(f"Reading usable subnetworks (project={project}, filter={filter_ or CONSTANTS.ALL_FILTER_ID})")

    client = config.compute_client()
    # All pages are collected before anything is written to data
    subnetworks = [flatten_usable_subnetwork(item) for item in list_usable_subnetworks(client, project, filter_)]

    data.set("project", project)
    data.set("subnetworks", subnetworks)
    data.set_id(usable_subnetworks_id(project, filter_))
