"""
Flattening of `terraform show -json` output.

Checks compare against Terraform's flatmap representation, where every
attribute is a string keyed by its path:

    {"name": "net", "secondary_ip_ranges": [{"range_name": "pods"}], "labels": {"a": "b"}}

becomes

    {"name": "net",
     "secondary_ip_ranges.#": "1",
     "secondary_ip_ranges.0.range_name": "pods",
     "labels.%": "1",
     "labels.a": "b"}

Null values are omitted, booleans become "true"/"false".
"""

import json
from typing import Any, Dict

FlatState = Dict[str, Dict[str, str]]


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def flatten_attributes(values: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
    """Flatten one resource's `values` object into flatmap form."""
    flat: Dict[str, str] = {}

    def _walk(key: str, value: Any, in_list: bool = False) -> None:
        if value is None:
            return
        if isinstance(value, dict):
            # List elements are nested blocks; only map attributes carry a count
            if not in_list:
                flat[f"{key}.%"] = str(len(value))
            for child_key, child in value.items():
                _walk(f"{key}.{child_key}", child)
        elif isinstance(value, list):
            flat[f"{key}.#"] = str(len(value))
            for index, child in enumerate(value):
                _walk(f"{key}.{index}", child, in_list=True)
        else:
            flat[key] = _format_scalar(value)

    for key, value in values.items():
        _walk(f"{prefix}{key}", value)
    return flat


def _collect_module(module: Dict[str, Any], flat: FlatState) -> None:
    for resource in module.get("resources", []):
        flat[resource["address"]] = flatten_attributes(resource.get("values") or {})
    for child in module.get("child_modules", []):
        _collect_module(child, flat)


def flatten_state(show_json: Dict[str, Any]) -> FlatState:
    """
    Convert `terraform show -json` output into {address: flat attributes}.

    Addresses are Terraform's own (e.g. "google_alloydb_backup.default",
    "data.google_compute_usable_subnetworks.usable", "module.net.google_compute_network.vpc").
    """
    flat: FlatState = {}
    root = show_json.get("values", {}).get("root_module")
    if root:
        _collect_module(root, flat)
    return flat


def resource_attributes(state: FlatState, address: str) -> Dict[str, str]:
    """
    Attributes of one resource.

    Raises:
        AssertionError: If the resource is not in state
    """
    if address not in state:
        raise AssertionError(f"Not found: {address} in state. Resources: {sorted(state)}")
    return state[address]


def dumps(state: FlatState) -> str:
    return json.dumps(state, indent=2, sort_keys=True)
