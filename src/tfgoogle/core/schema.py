"""
Declarative schema description for data sources.

A data source is described by a Resource: an ordered mapping of attribute
names to Schema entries plus the read function that fills a ResourceData.
This mirrors the shape Terraform providers use, so the same description
drives argument validation, the result container and generated docs.

Usage:
    resource = Resource(
        name="google_compute_usable_subnetworks",
        schema={
            "project": Schema(SchemaType.STRING, optional=True, computed=True),
            "filter": Schema(SchemaType.STRING, optional=True),
        },
        read=my_read_function,
    )

    data = resource.new_data({"project": "my-project"})
    diags = resource.read_data_source(data, config)
    if not diags.has_error():
        print(data.state())
"""

import copy
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from .exceptions import ConfigurationError, StateError

logger = logging.getLogger(__name__)


class SchemaType(Enum):
    STRING = "string"
    INT = "int"
    BOOL = "bool"
    FLOAT = "float"
    LIST = "list"
    SET = "set"
    MAP = "map"


_SCALAR_ZERO_VALUES = {
    SchemaType.STRING: "",
    SchemaType.INT: 0,
    SchemaType.BOOL: False,
    SchemaType.FLOAT: 0.0,
}

_SCALAR_PYTHON_TYPES = {
    SchemaType.STRING: str,
    SchemaType.INT: int,
    SchemaType.BOOL: bool,
    SchemaType.FLOAT: (int, float),
}


@dataclass
class Schema:
    """
    Description of a single attribute.

    Attributes:
        type: Attribute type
        description: Text used in generated documentation
        optional: May be given as an argument
        required: Must be given as an argument
        computed: Set by the provider during read
        elem: Element description for LIST/SET attributes. A Resource for
              lists of objects, a Schema for lists of scalars.
    """

    type: SchemaType
    description: str = ""
    optional: bool = False
    required: bool = False
    computed: bool = False
    elem: Optional[Union["Schema", "Resource"]] = None

    @property
    def is_argument(self) -> bool:
        return self.optional or self.required

    def zero_value(self) -> Any:
        if self.type in (SchemaType.LIST, SchemaType.SET):
            return []
        if self.type is SchemaType.MAP:
            return {}
        return _SCALAR_ZERO_VALUES[self.type]


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single problem reported back to the caller of a read."""

    severity: Severity
    summary: str
    detail: str = ""
    error: Optional[BaseException] = None

    @classmethod
    def from_error(cls, error: BaseException) -> "Diagnostic":
        return cls(severity=Severity.ERROR, summary=str(error), error=error)


class Diagnostics(list):
    """List of Diagnostic entries."""

    def has_error(self) -> bool:
        return any(diag.severity is Severity.ERROR for diag in self)

    def errors(self) -> list[Diagnostic]:
        return [diag for diag in self if diag.severity is Severity.ERROR]


def _validate_value(resource_name: str, key: str, schema: Schema, value: Any) -> Any:
    if value is None:
        return None

    if schema.type in _SCALAR_PYTHON_TYPES:
        expected = _SCALAR_PYTHON_TYPES[schema.type]
        # bool is an int subclass
        if isinstance(value, bool) and schema.type is not SchemaType.BOOL:
            raise StateError(key, f"expected {schema.type.value}, got bool", resource=resource_name)
        if not isinstance(value, expected):
            raise StateError(
                key, f"expected {schema.type.value}, got {type(value).__name__}", resource=resource_name
            )
        return value

    if schema.type is SchemaType.MAP:
        if not isinstance(value, Mapping):
            raise StateError(key, f"expected a map, got {type(value).__name__}", resource=resource_name)
        return dict(value)

    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise StateError(key, f"expected a list, got {type(value).__name__}", resource=resource_name)

    items = []
    for index, item in enumerate(value):
        item_key = f"{key}.{index}"
        if isinstance(schema.elem, Resource):
            items.append(schema.elem._validate_object(item_key, item, resource_name))
        elif isinstance(schema.elem, Schema):
            items.append(_validate_value(resource_name, item_key, schema.elem, item))
        else:
            items.append(item)
    return items


@dataclass
class Resource:
    """
    A data source (or nested block) description.

    Attributes:
        schema: Attribute name -> Schema, in declaration order
        read: Callable (data, config) -> None filling the ResourceData
        description: Text used in generated documentation
        name: Terraform type name (empty for nested blocks)
    """

    schema: Dict[str, Schema]
    read: Optional[Callable[["ResourceData", Any], None]] = None
    description: str = ""
    name: str = ""

    def arguments(self) -> Dict[str, Schema]:
        return {key: schema for key, schema in self.schema.items() if schema.is_argument}

    def attributes(self) -> Dict[str, Schema]:
        """Computed-only attributes."""
        return {key: schema for key, schema in self.schema.items() if not schema.is_argument}

    def _validate_object(self, key: str, value: Any, resource_name: str) -> dict:
        if not isinstance(value, Mapping):
            raise StateError(key, f"expected an object, got {type(value).__name__}", resource=resource_name)

        for name in value:
            if name not in self.schema:
                raise StateError(f"{key}.{name}", "attribute is not in schema", resource=resource_name)

        result = {}
        for name, schema in self.schema.items():
            item = _validate_value(resource_name, f"{key}.{name}", schema, value.get(name))
            result[name] = schema.zero_value() if item is None else item
        return result

    def new_data(self, arguments: Optional[Mapping[str, Any]] = None) -> "ResourceData":
        """
        Validate user arguments and create the result container.

        Raises:
            ConfigurationError: Unknown argument, computed-only attribute given,
                                required argument missing, or wrong argument type
        """
        arguments = dict(arguments or {})

        for key in arguments:
            if key not in self.schema:
                raise ConfigurationError(f'An argument named "{key}" is not expected here', resource=self.name)
            if not self.schema[key].is_argument:
                raise ConfigurationError(
                    f'"{key}" is a read-only attribute and cannot be set', resource=self.name
                )

        for key, schema in self.schema.items():
            if schema.required and arguments.get(key) in (None, ""):
                raise ConfigurationError(
                    f'The argument "{key}" is required, but no definition was found', resource=self.name
                )

        data = ResourceData(self)
        for key, value in arguments.items():
            try:
                data.set(key, value)
            except StateError as e:
                raise ConfigurationError(e.message, resource=self.name) from e
        return data

    def read_data_source(self, data: "ResourceData", config: Any) -> Diagnostics:
        """
        Run the read function, converting any failure into a diagnostic.

        The error is not retried or recovered; the diagnostic keeps the
        original exception in its `error` field.
        """
        diags = Diagnostics()
        if self.read is None:
            diags.append(Diagnostic(Severity.ERROR, f"{self.name} does not implement read"))
            return diags

        try:
            self.read(data, config)
        except Exception as e:
            logger.debug(f"Read of {self.name} failed: {e!r}")
            diags.append(Diagnostic.from_error(e))
        return diags


class ResourceData:
    """
    Result container for one read.

    Values are validated against the schema on set. Unset attributes read
    back as their zero value.
    """

    def __init__(self, resource: Resource):
        self._resource = resource
        self._values: Dict[str, Any] = {}
        self._id = ""

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        self._id = value

    def _schema_for(self, key: str) -> Schema:
        if key not in self._resource.schema:
            raise StateError(key, "attribute is not in schema", resource=self._resource.name)
        return self._resource.schema[key]

    def get(self, key: str) -> Any:
        """Stored value or the zero value. Lists and maps are copies; writes go through set()."""
        schema = self._schema_for(key)
        value = self._values.get(key)
        if value is None:
            return schema.zero_value()
        return copy.deepcopy(value) if isinstance(value, (list, dict)) else value

    def set(self, key: str, value: Any) -> None:
        schema = self._schema_for(key)
        self._values[key] = _validate_value(self._resource.name, key, schema, value)

    def state(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": self._id}
        for key in self._resource.schema:
            result[key] = self.get(key)
        return result
