"""
Example configurations used by generated documentation and tests.

Each Example points at a packaged Jinja2 template and declares the
variables it needs. The same template renders two ways:

    doc_context()          -> stable, readable names for documentation
    test_context(suffix)   -> "tf-test-" prefixed names with a random suffix,
                              so parallel acceptance runs do not collide

Usage:
    from tfgoogle.examples import get_example, render_example

    print(render_example("gkebackup_backupplan_basic",
                         cluster_name="c1", name="bp1", project="proj"))
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from tfgoogle import constants as CONSTANTS
from tfgoogle.core.exceptions import TemplateRenderError
from .renderer import render_string, render_template, template_source

# Documentation placeholders for variables filled from the environment in tests
_DOC_ENV_VALUES = {
    "project": CONSTANTS.DOC_PROJECT_PLACEHOLDER,
}

# Environment variable consulted for each test env var
_TEST_ENV_VARS = {
    "project": CONSTANTS.PROJECT_ENV_VARS,
}


@dataclass
class Example:
    """
    Metadata for one example configuration.

    Attributes:
        name: Example name, also the template file name
        primary_resource_type: Terraform type the example demonstrates
        primary_resource_id: Name of the primary block in the template
        vars: Documentation values of generated names
        test_env_vars: Variables taken from the environment in tests
        ignore_read_extra: Attributes excluded from import verification
        data_source: True when the primary block is a data source
        skip_test: Exclude the example from generated acceptance tests
    """

    name: str
    primary_resource_type: str
    primary_resource_id: str
    vars: Dict[str, str] = field(default_factory=dict)
    test_env_vars: List[str] = field(default_factory=list)
    ignore_read_extra: List[str] = field(default_factory=list)
    data_source: bool = False
    skip_test: bool = False

    @property
    def template(self) -> str:
        return self.name

    @property
    def resource_address(self) -> str:
        prefix = "data." if self.data_source else ""
        return f"{prefix}{self.primary_resource_type}.{self.primary_resource_id}"

    def doc_context(self) -> Dict[str, str]:
        context = dict(self.vars)
        for var in self.test_env_vars:
            context[var] = _DOC_ENV_VALUES.get(var, var.upper())
        return context

    def test_context(self, suffix: str, env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Variables for an acceptance run.

        Raises:
            TemplateRenderError: If a test env var has no value in env
        """
        env = env or {}
        context = {
            var: f"{CONSTANTS.TEST_RESOURCE_PREFIX}{value}{suffix}"
            for var, value in self.vars.items()
        }
        for var in self.test_env_vars:
            value = next((env[name] for name in _TEST_ENV_VARS.get(var, [var.upper()]) if env.get(name)), "")
            if not value:
                raise TemplateRenderError(self.name, f"no value in the environment for '{var}'")
            context[var] = value
        return context

    def render(self, context: Optional[Mapping[str, Any]] = None) -> str:
        return render_template(self.template, self.doc_context() if context is None else context)

    def source(self) -> str:
        return template_source(self.template)


EXAMPLES: Dict[str, Example] = {
    example.name: example
    for example in [
        Example(
            name="gkebackup_backupplan_basic",
            primary_resource_type="google_gke_backup_backup_plan",
            primary_resource_id="basic",
            vars={"cluster_name": "basic-cluster", "name": "basic-plan"},
            test_env_vars=["project"],
            ignore_read_extra=["location"],
        ),
        Example(
            name="compute_usable_subnetworks_basic",
            primary_resource_type="google_compute_usable_subnetworks",
            primary_resource_id="usable",
            test_env_vars=["project"],
            data_source=True,
        ),
        Example(
            name="alloydb_backup_basic",
            primary_resource_type="google_alloydb_backup",
            primary_resource_id="default",
            vars={
                "alloydb_backup_id": "alloydb-backup",
                "alloydb_cluster_name": "alloydb-cluster",
                "alloydb_instance_name": "alloydb-instance",
                "network_name": "alloydb-network",
            },
            ignore_read_extra=["backup_id", "location", "reconciling", "update_time"],
        ),
        Example(
            name="alloydb_backup_full",
            primary_resource_type="google_alloydb_backup",
            primary_resource_id="full",
            vars={
                "alloydb_backup_id": "alloydb-backup",
                "alloydb_cluster_name": "alloydb-cluster",
                "alloydb_instance_name": "alloydb-instance",
                "network_name": "alloydb-network",
            },
            ignore_read_extra=[
                "backup_id", "location", "reconciling", "update_time", "labels", "terraform_labels",
            ],
        ),
    ]
}


def list_examples() -> list[str]:
    return sorted(EXAMPLES)


def get_example(name: str) -> Example:
    if name not in EXAMPLES:
        raise TemplateRenderError(name, f"unknown example. Available: {list_examples()}")
    return EXAMPLES[name]


def examples_for(resource_type: str) -> list[Example]:
    """Examples whose primary block has the given Terraform type."""
    return [example for example in EXAMPLES.values() if example.primary_resource_type == resource_type]


def render_example(example_name: str, /, **context: Any) -> str:
    """
    Render an example with explicit variables (no defaults are added).

    example_name is positional-only so `name` stays usable as a template variable.
    """
    return render_template(get_example(example_name).template, context)


__all__ = [
    "EXAMPLES",
    "Example",
    "examples_for",
    "get_example",
    "list_examples",
    "render_example",
    "render_string",
    "render_template",
]
