"""
OpenCover invocation.

Build engine arguments from a coverage project and run the engine.
"""

from opencover_driver.invocation.arguments import (
    build_arguments,
    remove_test_symbols,
    symbols_file_for,
)
from opencover_driver.invocation.filters import (
    DEFAULT_EXCLUDED_ATTRIBUTES,
    DEFAULT_FILTER,
    build_excluded_attributes,
    build_excluded_files,
    build_filters,
    format_excluded_attributes,
    sanitize_filter_token,
    toggle_attribute_name,
)
from opencover_driver.invocation.runner import OpenCoverRunner

__all__ = [
    "DEFAULT_EXCLUDED_ATTRIBUTES",
    "DEFAULT_FILTER",
    "OpenCoverRunner",
    "build_arguments",
    "build_excluded_attributes",
    "build_excluded_files",
    "build_filters",
    "format_excluded_attributes",
    "remove_test_symbols",
    "sanitize_filter_token",
    "symbols_file_for",
    "toggle_attribute_name",
]
