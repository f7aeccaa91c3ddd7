"""Markdown documentation generation for a single resource."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Iterable

from .codegen_markdown import schema_to_table
from .schema import Resource, ResourceMethod
from .view import View, default_view

DEFAULT_REGISTRY_URL = "https://pypi.org/project"
FOOTER = (
    "*README auto-generated with "
    "[resource-docs](https://github.com/resource-docs/resource-docs)*"
)


@dataclass(frozen=True)
class RenderedDocument:
    """Sections of a resource document, ready to be handed to a template."""

    toc: str
    name: str
    desc: str
    usage: str
    properties: str
    methods: str
    dependencies: str
    footer: str

    def as_context(self) -> dict[str, Any]:
        return asdict(self)


def assemble(resource: Resource, registry_url: str = DEFAULT_REGISTRY_URL) -> RenderedDocument:
    """Build every document section for *resource*."""
    return RenderedDocument(
        toc=build_table_of_contents(resource),
        name=resource.name + "\n",
        desc=resource.description,
        usage=resource_usage(resource),
        properties=resource_properties(resource),
        methods=resource_methods(resource),
        dependencies=resource_dependencies(resource, registry_url),
        footer=generate_footer(),
    )


def generate(
    resource: Resource,
    view: View | None = None,
    registry_url: str = DEFAULT_REGISTRY_URL,
) -> str:
    """Render the Markdown document of *resource* through *view*."""
    if view is None:
        view = default_view()
    return view.render(assemble(resource, registry_url).as_context())


def generate_all(
    resources: Iterable[Resource],
    view: View | None = None,
    registry_url: str = DEFAULT_REGISTRY_URL,
) -> str:
    """Render the documents of all *resources* into a single text."""
    if view is None:
        view = default_view()
    return "".join(generate(resource, view, registry_url) + "\n\n" for resource in resources)


def generate_docs(
    resource: Resource,
    output: str | Path,
    view: View | None = None,
    registry_url: str = DEFAULT_REGISTRY_URL,
) -> None:
    """Generate Markdown docs for *resource* at *output*."""
    rendered = generate(resource, view, registry_url)

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rendered, encoding="utf-8")


def build_table_of_contents(resource: Resource) -> str:
    text = "## API\n\n"

    schema = resource.schema
    if schema is None or schema.properties is None:
        return text

    text += f"#### [properties](#{resource.name}-properties)\n\n"
    for key in schema.property_names():
        text += f"  - [{key}](#{resource.name}-properties-{key})\n\n"
    text += "\n"

    text += f"#### [methods](#{resource.name}-methods)\n\n"
    for method in resource.methods:
        text += (
            f"  - [{method.name}](#{resource.name}-methods-{method.name})"
            f" ({_argument_list(method)})\n\n"
        )
    return text


def resource_usage(resource: Resource) -> str:
    return f'    import resources\n    resources.use("{resource.name}")\n'


def resource_properties(resource: Resource) -> str:
    schema = resource.schema
    if schema is None or schema.properties is None:
        return ""

    text = ""
    if len(schema.properties) > 1:
        text += f'<a name="{resource.name}-properties"></a>\n\n'
        text += "## properties\n"
    return text + schema_to_table(schema)


def resource_methods(resource: Resource) -> str:
    text = f'<a name="{resource.name}-methods"></a>\n\n'
    text += "## methods\n\n"

    for method in resource.methods:
        text += f'<a name="{resource.name}-methods-{method.name}"></a>\n\n'
        text += f"### {resource.name}.{method.name}({_argument_list(method)})\n\n"
        text += schema_to_table(method.schema)
    return text


def resource_dependencies(resource: Resource, registry_url: str = DEFAULT_REGISTRY_URL) -> str:
    if not resource.dependencies:
        return ""

    base = registry_url.rstrip("/")
    text = "## dependencies\n"
    for name, constraint in resource.dependencies:
        version = "" if constraint == "*" else f" v{constraint}"
        text += f"- [{name}]({base}/{name}){version}\n"
    return text


def generate_footer() -> str:
    return FOOTER


def _argument_list(method: ResourceMethod) -> str:
    return ", ".join(method.arguments)
