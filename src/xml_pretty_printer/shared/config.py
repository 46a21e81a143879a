"""Configuration classes for XML pretty printing.

This module provides configuration objects for the printer and the layout
renderer, enabling fine-tuned control over how documents are laid out.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

DEFAULT_IGNORE_START_MARKER = "<!-- prettier-ignore-start -->"
DEFAULT_IGNORE_END_MARKER = "<!-- prettier-ignore-end -->"


class QuoteStyle(Enum):
    """Attribute quoting policy."""

    DOUBLE = "double"       # Force double quotes, re-escape embedded "
    SINGLE = "single"       # Force single quotes, re-escape embedded '
    PRESERVE = "preserve"   # Keep the original literal untouched


class WhitespaceSensitivity(Enum):
    """Policy governing whether whitespace between fragments is significant."""

    STRICT = "strict"       # Whitespace is always significant
    IGNORE = "ignore"       # Whitespace may be discarded and reflowed
    PRESERVE = "preserve"   # Significant only around text content

    @classmethod
    def _missing_(cls, value: object) -> Optional["WhitespaceSensitivity"]:
        if value == "ignorable":
            return cls.IGNORE
        return None


class EndOfLine(Enum):
    """Line terminator used for rendered output."""

    LF = "lf"
    CRLF = "crlf"
    CR = "cr"

    @property
    def sequence(self) -> str:
        """Get the literal line terminator."""
        return {"lf": "\n", "crlf": "\r\n", "cr": "\r"}[self.value]


@dataclass(frozen=True)
class PrintConfig:
    """Configuration for the tree-to-layout transformation."""

    quote_attributes: QuoteStyle = QuoteStyle.PRESERVE
    whitespace_sensitivity: WhitespaceSensitivity = WhitespaceSensitivity.STRICT
    sort_attributes: bool = False
    single_attribute_per_line: bool = False
    bracket_same_line: bool = False
    self_closing_space: bool = True

    # Comment images delimiting verbatim regions
    ignore_start_marker: str = DEFAULT_IGNORE_START_MARKER
    ignore_end_marker: str = DEFAULT_IGNORE_END_MARKER

    def __post_init__(self) -> None:
        """Validate print configuration."""
        if isinstance(self.quote_attributes, str):
            object.__setattr__(self, "quote_attributes", QuoteStyle(self.quote_attributes))
        if isinstance(self.whitespace_sensitivity, str):
            object.__setattr__(
                self,
                "whitespace_sensitivity",
                WhitespaceSensitivity(self.whitespace_sensitivity),
            )
        if not self.ignore_start_marker or not self.ignore_end_marker:
            raise ValueError("ignore markers cannot be empty")
        if self.ignore_start_marker == self.ignore_end_marker:
            raise ValueError("ignore start and end markers must differ")


@dataclass(frozen=True)
class LayoutConfig:
    """Configuration for the width-aware layout renderer."""

    print_width: int = 80
    tab_width: int = 2
    use_tabs: bool = False
    end_of_line: EndOfLine = EndOfLine.LF

    def __post_init__(self) -> None:
        """Validate layout configuration."""
        if isinstance(self.end_of_line, str):
            object.__setattr__(self, "end_of_line", EndOfLine(self.end_of_line))
        if self.print_width <= 0:
            raise ValueError("print_width must be > 0")
        if self.tab_width <= 0:
            raise ValueError("tab_width must be > 0")

    @property
    def indentation(self) -> str:
        """Get the string emitted for one indentation level."""
        return "\t" if self.use_tabs else " " * self.tab_width


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


_COMPONENTS = ("printer", "layout")


@dataclass(frozen=True)
class FormatterConfig:
    """Complete configuration for formatting XML documents.

    Immutable, so a single instance can be shared between formatter instances.
    """

    printer: PrintConfig = field(default_factory=PrintConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)

    logging_level: str = "WARNING"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete formatter configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ConfigValidationError(
                f"logging_level must be one of {valid_levels}",
                field_name="logging_level",
            )

    def override(self, **kwargs: Any) -> "FormatterConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Configuration fields to override, using
                ``component__field`` for nested fields

        Returns:
            New FormatterConfig instance with overrides applied

        Example:
            >>> config = FormatterConfig()
            >>> new_config = config.override(
            ...     printer__sort_attributes=True,
            ...     layout__print_width=100
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"{name}__{field_name}" for name in _COMPONENTS],
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for component in _COMPONENTS:
                current = getattr(self, component)
                if isinstance(nested_overrides.get(component), dict):
                    new_fields[component] = replace(current, **nested_overrides[component])
            for key, value in nested_overrides.items():
                if key not in _COMPONENTS:
                    new_fields[key] = value
            return replace(self, **new_fields)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format.

        Returns:
            Dictionary representation of the configuration
        """
        def _dataclass_to_dict(obj: Any) -> Any:
            """Recursively convert dataclass to dict."""
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.value
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormatterConfig":
        """Create configuration from dictionary.

        Enum-valued fields accept their string values; unknown keys are
        rejected.
        """
        try:
            print_config = PrintConfig(**data.get("printer", {}))
            layout_config = LayoutConfig(**data.get("layout", {}))
            top_level = {
                key: value for key, value in data.items() if key not in _COMPONENTS
            }
            return cls(printer=print_config, layout=layout_config, **top_level)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "FormatterConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def strict(cls) -> "FormatterConfig":
        """Create preset that never touches whitespace inside elements."""
        return cls(name="strict")

    @classmethod
    def readable(cls) -> "FormatterConfig":
        """Create preset that reflows insignificant whitespace."""
        return cls(
            printer=PrintConfig(whitespace_sensitivity=WhitespaceSensitivity.IGNORE),
            name="readable",
        )

    @classmethod
    def canonical(cls) -> "FormatterConfig":
        """Create preset producing normalized quoting and attribute order."""
        return cls(
            printer=PrintConfig(
                quote_attributes=QuoteStyle.DOUBLE,
                whitespace_sensitivity=WhitespaceSensitivity.IGNORE,
                sort_attributes=True,
            ),
            name="canonical",
        )
