"""Resource descriptor and schema loading utilities."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Union

ENUM_KEY = "enum"


@dataclass(frozen=True)
class Scalar:
    """Leaf value of a schema."""

    value: Any

    @property
    def text(self) -> str:
        return format_scalar(self.value)


@dataclass(frozen=True)
class EnumList:
    """Sequence of allowed values found under an ``enum`` key."""

    values: tuple[str, ...]


@dataclass(frozen=True)
class Node:
    """Ordered mapping of schema keys to sub-nodes."""

    entries: tuple[tuple[str, "SchemaNode"], ...]

    def keys(self) -> list[str]:
        return [key for key, _ in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


SchemaNode = Union[Scalar, EnumList, Node]


@dataclass(frozen=True)
class Schema:
    """Schema owning a description and a property tree."""

    description: str | None = None
    properties: Node | None = None

    def property_names(self) -> list[str]:
        if self.properties is None:
            return []
        return self.properties.keys()


@dataclass(frozen=True)
class ResourceMethod:
    """Method of a resource together with its argument schema."""

    name: str
    schema: Schema | None = None

    @property
    def arguments(self) -> tuple[str, ...]:
        """Top-level argument names, in declaration order."""
        if self.schema is None:
            return ()
        return tuple(self.schema.property_names())


@dataclass(frozen=True)
class Resource:
    """Documentable resource."""

    name: str
    schema: Schema | None = None
    methods: tuple[ResourceMethod, ...] = ()
    dependencies: tuple[tuple[str, str], ...] = ()

    @property
    def description(self) -> str:
        if self.schema is None or self.schema.description is None:
            return ""
        return self.schema.description


def format_scalar(value: Any) -> str:
    """Return the Markdown text of a scalar schema value."""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    return str(value)


def to_schema_node(value: Any, key: str | None = None) -> SchemaNode:
    """Convert a raw schema value into a :class:`SchemaNode`.

    Parameters
    ----------
    value:
        Raw value as found in a resource descriptor.
    key:
        Key the value is stored under. Sequences stored under ``enum`` become
        :class:`EnumList`; every other sequence is keyed by element index.
        ``None`` entries of mappings and sequences are dropped.
    """
    if isinstance(value, (Scalar, EnumList, Node)):
        return value
    if isinstance(value, Mapping):
        return _to_node(value)
    if _is_sequence(value):
        if key == ENUM_KEY:
            return EnumList(tuple(format_scalar(item) for item in value))
        return Node(
            tuple(
                (str(index), to_schema_node(item))
                for index, item in enumerate(value)
                if item is not None
            )
        )
    return Scalar(value)


def to_schema(value: Any) -> Schema | None:
    """Convert a raw schema record into a :class:`Schema`."""
    if value is None:
        return None
    if isinstance(value, Schema):
        return value
    description = _field(value, "description")
    properties = _field(value, "properties")
    node: Node | None = None
    if isinstance(properties, Mapping):
        node = _to_node(properties)
    elif isinstance(properties, Node):
        node = properties
    return Schema(
        description=None if description is None else str(description),
        properties=node,
    )


def method(schema: Mapping[str, Any] | None = None) -> Callable[[Callable], Callable]:
    """Attach an argument *schema* to a resource method."""

    def decorator(func: Callable) -> Callable:
        func.schema = schema  # type: ignore[attr-defined]
        return func

    return decorator


def load_resource(
    value: Any,
    name: str | None = None,
    dependencies: Any = None,
) -> Resource:
    """Build a :class:`Resource` from a mapping or an attribute-bearing object.

    *name* and *dependencies* take precedence over the fields of *value*.
    """
    if isinstance(value, Resource) and name is None and dependencies is None:
        return value

    resource_name = name if name is not None else _field(value, "name")
    if not isinstance(resource_name, str) or not resource_name:
        raise ValueError("resource must define a non-empty 'name'")

    deps = dependencies if dependencies is not None else _field(value, "dependencies")
    return Resource(
        name=resource_name,
        schema=to_schema(_field(value, "schema")),
        methods=tuple(_load_methods(_field(value, "methods"))),
        dependencies=_load_dependencies(deps),
    )


def load_schema(path: str | Path) -> Resource:
    """Load a resource descriptor from the JSON file at *path*.

    Parameters
    ----------
    path:
        Location of the descriptor file. The resource name defaults to the
        file stem when the document does not define one.
    """
    file_path = Path(path)
    data = json.loads(file_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"resource descriptor '{file_path}' must be a JSON object")
    name = data.get("name") or file_path.stem
    return load_resource(data, name=name)


def _load_methods(methods: Any) -> Iterable[ResourceMethod]:
    if _is_sequence(methods):
        yield from (item for item in methods if isinstance(item, ResourceMethod))
        return
    if not isinstance(methods, Mapping):
        return
    for method_name, func in methods.items():
        if isinstance(func, ResourceMethod):
            yield func
        elif isinstance(func, Mapping):
            yield ResourceMethod(name=str(method_name), schema=to_schema(func.get("schema")))
        elif callable(func):
            yield ResourceMethod(
                name=str(method_name),
                schema=to_schema(getattr(func, "schema", None)),
            )


def _load_dependencies(dependencies: Any) -> tuple[tuple[str, str], ...]:
    if _is_sequence(dependencies):
        return tuple((str(dep), str(constraint)) for dep, constraint in dependencies)
    if not isinstance(dependencies, Mapping):
        return ()
    return tuple((str(dep), str(constraint)) for dep, constraint in dependencies.items())


def _to_node(mapping: Mapping[Any, Any]) -> Node:
    # absent values contribute nothing to the rendered tree
    return Node(
        tuple(
            (str(k), to_schema_node(v, str(k))) for k, v in mapping.items() if v is not None
        )
    )


def _field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))
