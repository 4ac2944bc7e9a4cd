"""
Documentation generator for data sources.

Builds one markdown page per registered data source from its schema
description and the examples whose primary block is that data source.

Usage:
    from tfgoogle.docs import write_docs
    write_docs("website/docs")
    # -> website/docs/d/compute_usable_subnetworks.html.markdown
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from jinja2 import Template

from tfgoogle import constants as CONSTANTS
from tfgoogle import services  # noqa: F401  (registers data sources)
from tfgoogle.core.registry import DataSourceRegistry
from tfgoogle.core.schema import Resource, Schema
from tfgoogle.examples import Example, examples_for

logger = logging.getLogger(__name__)

_SUBCATEGORIES = {
    "alloydb": "AlloyDB",
    "compute": "Compute Engine",
    "gke": "Backup for GKE",
}

EXAMPLE_USAGE_TEMPLATE = Template("""## Example Usage - {{ title }}


```hcl
{{ body }}```
""", keep_trailing_newline=True)

DATA_SOURCE_TEMPLATE = Template("""---
subcategory: "{{ subcategory }}"
description: |-
  {{ description }}
---

# {{ name }}

{{ description }}

{% for section in example_sections %}{{ section }}
{% endfor %}## Argument Reference

The following arguments are supported:

{% for line in argument_lines %}{{ line }}
{% endfor %}
## Attributes Reference

In addition to the arguments listed above, the following computed attributes are exported:

{% for line in attribute_lines %}{{ line }}
{% endfor %}{% for block_name, lines in nested_blocks %}
<a name="nested_{{ block_name }}"></a>The `{{ block_name }}` block contains:

{% for line in lines %}{{ line }}
{% endfor %}{% endfor %}""", keep_trailing_newline=True)


def example_title(example: Example) -> str:
    return " ".join(part.capitalize() for part in example.name.split("_"))


def render_example_usage(example: Example) -> str:
    """Markdown section showing the example rendered with documentation values."""
    return EXAMPLE_USAGE_TEMPLATE.render(title=example_title(example), body=example.render())


def subcategory_for(name: str) -> str:
    parts = name.split("_")
    service = parts[1] if len(parts) > 1 else name
    return _SUBCATEGORIES.get(service, service.capitalize())


def _attribute_line(key: str, schema: Schema, mode: Optional[str] = None) -> str:
    prefix = f"* `{key}` - "
    if mode:
        prefix += f"({mode}) "
    line = prefix + (schema.description or "")
    if isinstance(schema.elem, Resource):
        line += f" Structure is [documented below](#nested_{key})."
    return line.rstrip()


def _nested_blocks(resource: Resource) -> List[Tuple[str, List[str]]]:
    blocks = []
    pending = [(key, schema.elem) for key, schema in resource.schema.items() if isinstance(schema.elem, Resource)]
    while pending:
        block_name, block = pending.pop(0)
        blocks.append((block_name, [_attribute_line(key, schema) for key, schema in block.schema.items()]))
        pending.extend(
            (key, schema.elem) for key, schema in block.schema.items() if isinstance(schema.elem, Resource)
        )
    return blocks


def render_data_source_doc(name: str, resource: Resource, examples: Optional[List[Example]] = None) -> str:
    examples = examples_for(name) if examples is None else examples

    argument_lines = [
        _attribute_line(key, schema, "Required" if schema.required else "Optional")
        for key, schema in resource.arguments().items()
    ]
    attribute_lines = [_attribute_line(key, schema) for key, schema in resource.attributes().items()]

    return DATA_SOURCE_TEMPLATE.render(
        name=name,
        subcategory=subcategory_for(name),
        description=resource.description,
        example_sections=[render_example_usage(example) for example in examples],
        argument_lines=argument_lines,
        attribute_lines=attribute_lines,
        nested_blocks=_nested_blocks(resource),
    )


def doc_path(output_dir: Path, name: str) -> Path:
    short_name = name[len("google_"):] if name.startswith("google_") else name
    return output_dir / CONSTANTS.DOCS_DATA_SOURCE_DIR / f"{short_name}{CONSTANTS.DOCS_FILE_SUFFIX}"


def write_docs(output_dir: str) -> list[Path]:
    """
    Write a documentation page for every registered data source.

    Returns:
        Paths of the written files
    """
    output_path = Path(output_dir)
    written = []
    for name in DataSourceRegistry.list_data_sources():
        path = doc_path(output_path, name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_data_source_doc(name, DataSourceRegistry.get(name)), encoding="utf-8")
        logger.info(f"✓ Generated docs: {path}")
        written.append(path)
    return written
