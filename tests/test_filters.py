"""
Tests for OpenCover filter construction.
"""

import pytest

from opencover_driver.invocation import (
    DEFAULT_FILTER,
    build_excluded_attributes,
    build_excluded_files,
    build_filters,
    format_excluded_attributes,
    sanitize_filter_token,
    toggle_attribute_name,
)
from opencover_driver.models import FilterSettings, ReferencedProject


class TestSanitizeFilterToken:
    """Test sanitize_filter_token."""

    def test_plain_value_unchanged(self):
        """Test that a clean value passes through."""
        assert sanitize_filter_token("[MyApp]*") == "[MyApp]*"

    def test_trims_spaces_and_single_quotes(self):
        """Test surrounding spaces and single quotes are removed."""
        assert sanitize_filter_token(" '[MyApp]*' ") == "[MyApp]*"

    def test_escapes_double_quotes(self):
        """Test embedded double quotes are escaped."""
        assert sanitize_filter_token('"[MyApp]*"') == '\\"[MyApp]*\\"'

    def test_trailing_escaped_quote_survives_trimming(self):
        """Test escaping happens before trimming."""
        assert sanitize_filter_token('[MyApp]* "') == '[MyApp]* \\"'

    def test_inner_spaces_preserved(self):
        """Test only the ends are trimmed."""
        assert sanitize_filter_token("  a b  ") == "a b"


class TestBuildFilters:
    """Test build_filters."""

    def test_no_settings_gives_default_only(self):
        """Test empty settings produce only the catch-all filter."""
        assert build_filters(FilterSettings()) == [DEFAULT_FILTER]

    def test_blank_includes_fall_back_to_default(self):
        """Test blank include patterns are ignored."""
        settings = FilterSettings(include=["", "   ", "''"])

        assert build_filters(settings) == [DEFAULT_FILTER]

    def test_includes_replace_default(self):
        """Test configured includes replace the catch-all."""
        settings = FilterSettings(include=["[MyApp]*", "[MyLib]*"])

        assert build_filters(settings) == ["+[MyApp]*", "+[MyLib]*"]

    def test_excludes_follow_default(self):
        """Test excludes are appended after the default include."""
        settings = FilterSettings(exclude=["[MyApp]MyApp.Generated.*"])

        assert build_filters(settings) == [DEFAULT_FILTER, "-[MyApp]MyApp.Generated.*"]

    def test_order_is_include_exclude_referenced(self):
        """Test entries are ordered includes, excludes, referenced projects."""
        settings = FilterSettings(include=["[A]*"], exclude=["[B]*"])
        referenced = [
            ReferencedProject(assembly_name="C", exclude_from_code_coverage=True),
        ]

        assert build_filters(settings, referenced) == ["+[A]*", "-[B]*", "-[C]*"]

    def test_only_flagged_referenced_projects_excluded(self):
        """Test referenced projects without the flag are not excluded."""
        referenced = [
            ReferencedProject(assembly_name="Kept"),
            ReferencedProject(assembly_name="Dropped", exclude_from_code_coverage=True),
        ]

        assert build_filters(FilterSettings(), referenced) == [DEFAULT_FILTER, "-[Dropped]*"]

    def test_duplicates_removed_keeping_first(self):
        """Test duplicate entries are removed in first-seen order."""
        settings = FilterSettings(
            include=["[A]*", " [A]* ", "[B]*"],
            exclude=["[Gen]*", "'[Gen]*'"],
        )
        referenced = [
            ReferencedProject(assembly_name="Gen", exclude_from_code_coverage=True),
        ]

        assert build_filters(settings, referenced) == ["+[A]*", "+[B]*", "-[Gen]*"]

    def test_settings_not_mutated(self):
        """Test that building filters leaves settings untouched."""
        settings = FilterSettings(include=[" '[A]*' "])

        build_filters(settings)

        assert settings.include == [" '[A]*' "]


class TestBuildExcludedFiles:
    """Test build_excluded_files."""

    def test_empty(self):
        """Test no globs configured."""
        assert build_excluded_files(FilterSettings()) == []

    def test_blank_globs_dropped(self):
        """Test blank globs are skipped and others sanitized."""
        settings = FilterSettings(exclude_by_file=["", " **/Migrations/*.cs ", "  "])

        assert build_excluded_files(settings) == ["**/Migrations/*.cs"]


class TestToggleAttributeName:
    """Test toggle_attribute_name."""

    def test_appends_suffix(self):
        """Test a short name gains the Attribute suffix."""
        assert toggle_attribute_name("Foo") == "FooAttribute"

    def test_strips_suffix(self):
        """Test a full name loses the Attribute suffix."""
        assert toggle_attribute_name("CustomAttribute") == "Custom"

    def test_suffix_check_ignores_case(self):
        """Test the suffix is matched case-insensitively."""
        assert toggle_attribute_name("Customattribute") == "Custom"
        assert toggle_attribute_name("CUSTOMATTRIBUTE") == "CUSTOM"

    def test_only_trailing_suffix_stripped(self):
        """Test an inner 'Attribute' is left alone."""
        assert toggle_attribute_name("AttributeUsageAttribute") == "AttributeUsage"


class TestBuildExcludedAttributes:
    """Test build_excluded_attributes."""

    def test_defaults_only(self):
        """Test the implicit attributes and their full forms."""
        assert build_excluded_attributes(FilterSettings()) == [
            "ExcludeFromCodeCoverage",
            "ExcludeFromCodeCoverageAttribute",
            "ExcludeFromCoverage",
            "ExcludeFromCoverageAttribute",
        ]

    def test_configured_name_and_toggle_added(self):
        """Test a configured short name adds both forms."""
        result = build_excluded_attributes(FilterSettings(exclude_by_attribute=["Foo"]))

        assert {"ExcludeFromCoverage", "ExcludeFromCodeCoverage", "Foo", "FooAttribute"} <= set(
            result
        )
        assert result == sorted(result, key=str.casefold)
        assert result[-2:] == ["Foo", "FooAttribute"]

    def test_full_name_toggles_to_short_name(self):
        """Test a name ending in Attribute is not doubled."""
        result = build_excluded_attributes(
            FilterSettings(exclude_by_attribute=["CustomAttribute"])
        )

        assert "Custom" in result
        assert "CustomAttribute" in result
        assert "CustomAttributeAttribute" not in result

    def test_case_insensitive_dedup_keeps_first(self):
        """Test names differing only in case collapse to the first seen."""
        result = build_excluded_attributes(
            FilterSettings(exclude_by_attribute=["excludefromcoverage", "FOOATTRIBUTE"])
        )

        assert result == [
            "ExcludeFromCodeCoverage",
            "ExcludeFromCodeCoverageAttribute",
            "ExcludeFromCoverage",
            "ExcludeFromCoverageAttribute",
            "FOO",
            "FOOATTRIBUTE",
        ]

    def test_sorted_ignoring_case(self):
        """Test lowercase names sort among uppercase ones."""
        result = build_excluded_attributes(FilterSettings(exclude_by_attribute=["alpha"]))

        assert result[:2] == ["alpha", "alphaAttribute"]

    def test_bare_suffix_does_not_produce_empty_name(self):
        """Test 'Attribute' alone does not yield an empty entry."""
        result = build_excluded_attributes(FilterSettings(exclude_by_attribute=["Attribute"]))

        assert "" not in result
        assert "Attribute" in result

    @pytest.mark.parametrize("blank", ["", "  ", "' '"])
    def test_blank_names_ignored(self, blank: str):
        """Test blank configured names add nothing."""
        result = build_excluded_attributes(FilterSettings(exclude_by_attribute=[blank]))

        assert len(result) == 4


class TestFormatExcludedAttributes:
    """Test format_excluded_attributes."""

    def test_format(self):
        """Test wildcard group formatting."""
        assert format_excluded_attributes(["A", "B"]) == "(*.A)|(*.B)"

    def test_single(self):
        """Test a single name."""
        assert format_excluded_attributes(["Foo"]) == "(*.Foo)"
