"""
Filter construction for OpenCover switches.

OpenCover filters use the ``+[assembly]namespace.type`` /
``-[assembly]namespace.type`` mini-syntax. Attribute exclusions are
matched by full type name, so both ``Foo`` and ``FooAttribute`` are sent.
"""

from collections.abc import Iterable

from opencover_driver.models import FilterSettings, ReferencedProject

DEFAULT_FILTER = "+[*]*"
ATTRIBUTE_SUFFIX = "Attribute"

# Attributes every coverage tool honours without configuration
DEFAULT_EXCLUDED_ATTRIBUTES = ("ExcludeFromCoverage", "ExcludeFromCodeCoverage")


def sanitize_filter_token(value: str) -> str:
    """
    Make a configured value safe to embed in a quoted switch.

    Double quotes are escaped first, then spaces and single quotes are
    trimmed from both ends. Escaping before trimming keeps a trailing
    escaped quote intact.
    """
    return value.replace('"', '\\"').strip(" '")


def _sanitized(values: Iterable[str]) -> list[str]:
    cleaned = (sanitize_filter_token(v) for v in values if v and v.strip())
    return [v for v in cleaned if v]


def build_filters(
    settings: FilterSettings,
    referenced_projects: Iterable[ReferencedProject] = (),
) -> list[str]:
    """
    Build the ordered, de-duplicated filter entries.

    Includes come first (or the catch-all default when there are none),
    then excludes, then referenced projects marked as excluded.
    """
    filters = [f"+{value}" for value in _sanitized(settings.include)]

    if not filters:
        filters.append(DEFAULT_FILTER)

    filters.extend(f"-{value}" for value in _sanitized(settings.exclude))

    filters.extend(
        f"-[{project.assembly_name}]*"
        for project in referenced_projects
        if project.exclude_from_code_coverage
    )

    return list(dict.fromkeys(filters))


def build_excluded_files(settings: FilterSettings) -> list[str]:
    """Sanitized exclude-by-file globs."""
    return _sanitized(settings.exclude_by_file)


def toggle_attribute_name(name: str) -> str:
    """
    Switch between the short and full form of an attribute name.

    ``CustomAttribute`` becomes ``Custom``; ``Custom`` becomes
    ``CustomAttribute``. The suffix check ignores case.
    """
    if name.lower().endswith(ATTRIBUTE_SUFFIX.lower()):
        return name[: -len(ATTRIBUTE_SUFFIX)]
    return f"{name}{ATTRIBUTE_SUFFIX}"


def build_excluded_attributes(settings: FilterSettings) -> list[str]:
    """
    Build the sorted set of attribute names to exclude.

    Starts from the implicit defaults plus the configured names, adds the
    toggled form of each, then de-duplicates and sorts ignoring case.
    """
    names = [*DEFAULT_EXCLUDED_ATTRIBUTES, *_sanitized(settings.exclude_by_attribute)]
    names.extend([toggle_attribute_name(name) for name in names])

    unique: dict[str, str] = {}
    for name in names:
        if name:
            unique.setdefault(name.casefold(), name)

    return sorted(unique.values(), key=str.casefold)


def format_excluded_attributes(names: Iterable[str]) -> str:
    """Format attribute names as ``(*.A)|(*.B)`` wildcard groups."""
    return "|".join(f"(*.{name})" for name in names)
