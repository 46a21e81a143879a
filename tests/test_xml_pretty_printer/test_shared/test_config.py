"""Tests for the configuration system."""

import json

import pytest

from xml_pretty_printer.shared.config import (
    DEFAULT_IGNORE_END_MARKER,
    DEFAULT_IGNORE_START_MARKER,
    ConfigError,
    ConfigValidationError,
    EndOfLine,
    FormatterConfig,
    LayoutConfig,
    PrintConfig,
    QuoteStyle,
    WhitespaceSensitivity,
)


class TestPrintConfig:
    """Test suite for PrintConfig."""

    def test_default_configuration(self):
        """Test default print configuration values."""
        config = PrintConfig()

        assert config.quote_attributes is QuoteStyle.PRESERVE
        assert config.whitespace_sensitivity is WhitespaceSensitivity.STRICT
        assert config.sort_attributes is False
        assert config.single_attribute_per_line is False
        assert config.bracket_same_line is False
        assert config.self_closing_space is True
        assert config.ignore_start_marker == DEFAULT_IGNORE_START_MARKER
        assert config.ignore_end_marker == DEFAULT_IGNORE_END_MARKER

    def test_string_values_are_coerced(self):
        """Test that enum fields accept their string values."""
        config = PrintConfig(quote_attributes="single", whitespace_sensitivity="preserve")

        assert config.quote_attributes is QuoteStyle.SINGLE
        assert config.whitespace_sensitivity is WhitespaceSensitivity.PRESERVE

    def test_ignorable_alias(self):
        """Test that 'ignorable' is accepted for the ignore policy."""
        config = PrintConfig(whitespace_sensitivity="ignorable")
        assert config.whitespace_sensitivity is WhitespaceSensitivity.IGNORE

    def test_invalid_enum_value(self):
        """Test that unknown enum values are rejected."""
        with pytest.raises(ValueError):
            PrintConfig(quote_attributes="backtick")

    def test_marker_validation(self):
        """Test ignore marker validation."""
        with pytest.raises(ValueError, match="cannot be empty"):
            PrintConfig(ignore_start_marker="")

        with pytest.raises(ValueError, match="must differ"):
            PrintConfig(ignore_start_marker="<!-- x -->", ignore_end_marker="<!-- x -->")

    def test_immutable(self):
        """Test that configurations cannot be modified."""
        config = PrintConfig()
        with pytest.raises(AttributeError):
            config.sort_attributes = True


class TestLayoutConfig:
    """Test suite for LayoutConfig."""

    def test_default_configuration(self):
        """Test default layout configuration values."""
        config = LayoutConfig()

        assert config.print_width == 80
        assert config.tab_width == 2
        assert config.use_tabs is False
        assert config.end_of_line is EndOfLine.LF
        assert config.indentation == "  "

    def test_tab_indentation(self):
        """Test indentation unit with tabs."""
        assert LayoutConfig(use_tabs=True).indentation == "\t"
        assert LayoutConfig(tab_width=4).indentation == "    "

    def test_end_of_line_sequences(self):
        """Test end of line coercion and sequences."""
        assert LayoutConfig(end_of_line="crlf").end_of_line.sequence == "\r\n"
        assert EndOfLine.CR.sequence == "\r"
        assert EndOfLine.LF.sequence == "\n"

    def test_validation_failures(self):
        """Test layout configuration validation failures."""
        with pytest.raises(ValueError, match="print_width must be > 0"):
            LayoutConfig(print_width=0)

        with pytest.raises(ValueError, match="tab_width must be > 0"):
            LayoutConfig(tab_width=-1)


class TestFormatterConfig:
    """Test suite for FormatterConfig."""

    def test_default_configuration(self):
        """Test default formatter configuration."""
        config = FormatterConfig()

        assert config.printer == PrintConfig()
        assert config.layout == LayoutConfig()
        assert config.logging_level == "WARNING"
        assert config.name is None

    def test_invalid_logging_level(self):
        """Test logging level validation."""
        with pytest.raises(ConfigValidationError) as exc_info:
            FormatterConfig(logging_level="VERBOSE")

        assert exc_info.value.field_name == "logging_level"

    def test_override_nested_fields(self):
        """Test overriding component fields."""
        config = FormatterConfig().override(
            printer__sort_attributes=True,
            layout__print_width=100,
            name="custom",
        )

        assert config.printer.sort_attributes is True
        assert config.layout.print_width == 100
        assert config.name == "custom"
        # Original untouched
        assert FormatterConfig().printer.sort_attributes is False

    def test_override_coerces_strings(self):
        """Test that overrides accept enum string values."""
        config = FormatterConfig().override(printer__quote_attributes="double")
        assert config.printer.quote_attributes is QuoteStyle.DOUBLE

    def test_override_unknown_component(self):
        """Test overriding an unknown component."""
        with pytest.raises(ConfigValidationError) as exc_info:
            FormatterConfig().override(renderer__print_width=10)

        assert exc_info.value.field_name == "renderer__print_width"
        assert "layout__print_width" in exc_info.value.suggestions

    def test_override_unknown_field(self):
        """Test overriding an unknown field."""
        with pytest.raises(ConfigValidationError):
            FormatterConfig().override(printer__colour=True)

    def test_override_invalid_value(self):
        """Test overriding with a value that fails validation."""
        with pytest.raises(ConfigValidationError, match="print_width"):
            FormatterConfig().override(layout__print_width=0)

    def test_dict_round_trip(self):
        """Test conversion to and from dictionaries."""
        config = FormatterConfig.canonical().override(layout__end_of_line="crlf")
        data = config.to_dict()

        assert data["printer"]["quote_attributes"] == "double"
        assert data["layout"]["end_of_line"] == "crlf"
        assert FormatterConfig.from_dict(data) == config

    def test_json_round_trip(self):
        """Test conversion to and from JSON."""
        config = FormatterConfig.readable()
        text = config.to_json()

        assert json.loads(text)["name"] == "readable"
        assert FormatterConfig.from_json(text) == config

    def test_from_dict_partial(self):
        """Test that missing keys use defaults."""
        config = FormatterConfig.from_dict({"printer": {"sort_attributes": True}})

        assert config.printer.sort_attributes is True
        assert config.layout == LayoutConfig()

    def test_from_dict_invalid(self):
        """Test that invalid dictionaries raise ConfigValidationError."""
        with pytest.raises(ConfigValidationError):
            FormatterConfig.from_dict({"printer": {"unknown": 1}})

        with pytest.raises(ConfigError):
            FormatterConfig.from_dict({"layout": {"print_width": -5}})

    def test_presets(self):
        """Test preset factory methods."""
        strict = FormatterConfig.strict()
        readable = FormatterConfig.readable()
        canonical = FormatterConfig.canonical()

        assert strict.printer.whitespace_sensitivity is WhitespaceSensitivity.STRICT
        assert readable.printer.whitespace_sensitivity is WhitespaceSensitivity.IGNORE
        assert canonical.printer.quote_attributes is QuoteStyle.DOUBLE
        assert canonical.printer.sort_attributes is True
        assert {strict.name, readable.name, canonical.name} == {"strict", "readable", "canonical"}
