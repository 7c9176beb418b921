"""
Version placeholder rewriting for self-updating manifests.

Package managers such as scoop re-check and update a manifest on their
own; the URLs they use must therefore carry a version placeholder instead
of the concrete version of the release that generated the manifest.

Replacement is a literal substring match. Any value that happens to
contain the version string (a build number equal to the version, say)
is rewritten as well.
"""

from typing import Any, Dict, Mapping

from . import config
from .template_renderer import is_template, render_field


def replace_version(
    value: Any,
    concrete_version: str,
    placeholder: str = config.VERSION_PLACEHOLDER,
) -> Any:
    """Replace every occurrence of concrete_version in a string value."""
    if not isinstance(value, str) or not concrete_version:
        return value
    return value.replace(concrete_version, placeholder)


def rewrite_for_autoupdate(
    context: Mapping[str, Any],
    concrete_version: str,
    placeholder: str = config.VERSION_PLACEHOLDER,
) -> Dict[str, Any]:
    """
    Derive a context whose version-bearing values use the placeholder.

    Args:
        context: Concrete release context; not modified
        concrete_version: Version string to replace
        placeholder: Token substituted for the version

    Returns:
        New dict; version-bearing keys rewritten, project version keys set
        to the placeholder, everything else passed through
    """
    rewritten = dict(context)
    for key in config.VERSION_BEARING_KEYS:
        if key in rewritten:
            rewritten[key] = replace_version(rewritten[key], concrete_version, placeholder)

    for key in (config.KEY_PROJECT_VERSION, config.KEY_PROJECT_EFFECTIVE_VERSION):
        if key in rewritten:
            rewritten[key] = placeholder
    return rewritten


def resolve_self_updating_field(
    raw_value: Any,
    context: Mapping[str, Any],
    concrete_version: str,
    placeholder: str = config.VERSION_PLACEHOLDER,
    target: str = "",
    field: str = "",
) -> Any:
    """
    Resolve a field that must stay valid for future versions.

    Literal values are rewritten directly. Templated values are rendered
    against the concrete context first, then rewritten; only if the result
    still carries template syntax is it rendered again, this time against
    the rewritten context.
    """
    if not is_template(raw_value):
        return replace_version(raw_value, concrete_version, placeholder)

    rendered = render_field(raw_value, context, target=target, field=field)
    rewritten = replace_version(rendered, concrete_version, placeholder)
    if is_template(rewritten):
        rewritten_context = rewrite_for_autoupdate(context, concrete_version, placeholder)
        rewritten = render_field(rewritten, rewritten_context, target=target, field=field)
    return rewritten
