"""Jinja2 template rendering for generated project files.

Templates use ``{{ name }}`` placeholders and are rendered with
``StrictUndefined``, so a missing variable is an error rather than an empty
string. Dart string interpolation (``$value`` or ``${user?.email}``) is not
Jinja2 syntax and passes through unchanged.
"""

from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
    meta,
)

from ..errors import TemplateError, UnresolvedPlaceholder
from ..models import TemplateSpec

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


def _finalize(value: Any) -> Any:
    # Dart and JSON spell booleans in lowercase.
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def create_environment(template_dir: Path | None = None) -> Environment:
    """Build the Jinja2 environment for a template directory."""
    return Environment(
        loader=FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
        finalize=_finalize,
    )


_default_env = create_environment()


def _environment(template_dir: Path | None) -> Environment:
    return _default_env if template_dir is None else create_environment(template_dir)


def find_placeholders(template: str) -> list[str]:
    """Return the sorted variable names a template references."""
    try:
        ast = _default_env.parse(template)
    except TemplateSyntaxError as e:
        raise TemplateError("<string>", f"line {e.lineno}: {e.message}") from e
    return sorted(meta.find_undeclared_variables(ast))


def render(template: str, variables: dict[str, Any]) -> str:
    """Substitute variables into template.

    Args:
        template: Jinja2 source with ``{{ name }}`` placeholders
        variables: Placeholder values

    Returns:
        Rendered text

    Raises:
        UnresolvedPlaceholder: If any placeholder has no value, listing all of them
        TemplateError: If the template is not valid Jinja2
    """
    missing = [name for name in find_placeholders(template) if name not in variables]
    if missing:
        raise UnresolvedPlaceholder(missing)
    try:
        return _default_env.from_string(template).render(**variables)
    except UndefinedError as e:
        raise UnresolvedPlaceholder([str(e)]) from e


def load_template(name: str, template_dir: Path | None = None) -> str:
    """Read a template body by file name.

    Raises:
        TemplateError: If the template is missing or unreadable
    """
    env = _environment(template_dir)
    try:
        source, _, _ = env.loader.get_source(env, name)  # type: ignore[union-attr]
    except TemplateNotFound as e:
        raise TemplateError(name, "template not found") from e
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateError(name, str(e)) from e
    return source


def render_template(name: str, variables: dict[str, Any], template_dir: Path | None = None) -> str:
    """Load and render a template in one call."""
    return render(load_template(name, template_dir), variables)


def render_spec(spec: TemplateSpec, template_dir: Path | None = None) -> str:
    """Render the file described by a TemplateSpec."""
    return render_template(spec.template, spec.variables, template_dir)
