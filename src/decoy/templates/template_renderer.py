"""Render Jinja2 report templates shipped inside a package's ``templates`` directory."""

import importlib.resources

import jinja2


def render_template(template_name: str, *, package: str, **kwargs) -> str:
    """Render ``template_name`` from ``{package}.templates``.

    Undefined variables raise instead of rendering as empty text, so a report
    never silently drops a field.
    """
    templates = importlib.resources.files(f"{package}.templates")
    source = templates.joinpath(template_name).read_text(encoding="utf-8")
    environment = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    return environment.from_string(source).render(**kwargs)
