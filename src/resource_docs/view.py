"""Template rendering for generated documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
DEFAULT_TEMPLATE = "resource.md.j2"

_INPUT_FORMATS = {"jinja", "jinja2"}


class View:
    """A template source bound to a rendering engine.

    Parameters
    ----------
    template:
        Template source text.
    input:
        Format of *template*. Only jinja templates are supported.
    """

    def __init__(self, template: str, input: str = "jinja") -> None:
        if input not in _INPUT_FORMATS:
            raise ValueError(f"unsupported template input '{input}'")
        self.template = template
        self.input = input
        self._env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._compiled = self._env.from_string(template)

    @classmethod
    def from_file(cls, path: str | Path, input: str = "jinja") -> "View":
        """Read a template source from *path*."""
        return cls(Path(path).read_text(encoding="utf-8"), input=input)

    def render(self, data: Mapping[str, Any]) -> str:
        """Render the template with *data* as context."""
        return self._compiled.render(dict(data))


def default_view() -> View:
    """Return a view of the packaged resource document template."""
    return View.from_file(TEMPLATE_DIR / DEFAULT_TEMPLATE)
