"""Tests for the CLI main module."""

import argparse
import json
from pathlib import Path

import pytest

from xml_pretty_printer.cli.main import (
    CLIConfig,
    XMLFileProcessor,
    create_argument_parser,
    main,
)
from xml_pretty_printer.shared import ConfigError, QuoteStyle, WhitespaceSensitivity


@pytest.fixture
def xml_file(tmp_path):
    path = tmp_path / "doc.xml"
    path.write_text("<a  x='1'><b/></a>", encoding="utf-8")
    return path


class TestCLIConfig:
    """Test CLI configuration management."""

    def test_default_config(self):
        """Test default configuration values."""
        config = CLIConfig()
        assert config.formatter_config.printer.whitespace_sensitivity is WhitespaceSensitivity.STRICT
        assert config.formatter_config.layout.print_width == 80

    def test_config_from_file(self, tmp_path):
        """Test loading a configuration file with a preset."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({
            "preset": "readable",
            "printer": {"sort_attributes": True},
            "layout": {"print_width": 100},
        }))

        config = CLIConfig.from_file(config_path).formatter_config

        assert config.name == "readable"
        assert config.printer.whitespace_sensitivity is WhitespaceSensitivity.IGNORE
        assert config.printer.sort_attributes is True
        assert config.layout.print_width == 100

    def test_config_from_file_without_preset(self, tmp_path):
        """Test loading a plain configuration dictionary."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"printer": {"quote_attributes": "single"}}))

        config = CLIConfig.from_file(config_path).formatter_config

        assert config.printer.quote_attributes is QuoteStyle.SINGLE

    @pytest.mark.parametrize(
        "content",
        ["{not json", "[1, 2]", '{"preset": "fancy"}', '{"printer": {"bogus": 1}}'],
    )
    def test_invalid_config_file(self, tmp_path, content):
        """Test invalid configuration files are rejected."""
        config_path = tmp_path / "config.json"
        config_path.write_text(content)

        with pytest.raises(ConfigError):
            CLIConfig.from_file(config_path)

    def test_missing_config_file(self, tmp_path):
        """Test a missing configuration file is rejected."""
        with pytest.raises(ConfigError):
            CLIConfig.from_file(tmp_path / "missing.json")

    def test_apply_arguments(self):
        """Test command-line options override the configuration."""
        config = CLIConfig()
        args = argparse.Namespace(
            preset="canonical",
            quote_attributes="single",
            print_width=40,
            self_closing_space=False,
            sort_attributes=None,
        )

        config.apply_arguments(args)

        formatter_config = config.formatter_config
        assert formatter_config.name == "canonical"
        assert formatter_config.printer.quote_attributes is QuoteStyle.SINGLE
        assert formatter_config.printer.sort_attributes is True
        assert formatter_config.printer.self_closing_space is False
        assert formatter_config.layout.print_width == 40


class TestXMLFileProcessor:
    """Test file discovery and processing."""

    def test_find_xml_files(self, tmp_path):
        """Test suffix filtering and recursion."""
        (tmp_path / "a.xml").write_text("<a/>")
        (tmp_path / "b.txt").write_text("text")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "c.svg").write_text("<svg/>")
        processor = XMLFileProcessor(CLIConfig())

        assert list(processor.find_xml_files(tmp_path)) == [tmp_path / "a.xml"]
        assert list(processor.find_xml_files(tmp_path, recursive=True)) == [
            tmp_path / "a.xml",
            tmp_path / "sub" / "c.svg",
        ]

    def test_explicit_file_always_included(self, tmp_path):
        """Test a file named explicitly is processed whatever its suffix."""
        path = tmp_path / "layout.txt"
        path.write_text("<a/>")
        processor = XMLFileProcessor(CLIConfig())

        assert processor.collect_files([path, tmp_path / "missing.xml"]) == [path]

    def test_process_single_file(self, xml_file):
        """Test processing summary for a file."""
        processor = XMLFileProcessor(CLIConfig())
        result = processor.process_single_file(xml_file)

        assert result["success"] is True
        assert result["changed"] is True
        assert result["written"] is False
        assert result["formatted"] == "<a x='1'><b /></a>\n"
        assert "processing_time_ms" in result

    def test_process_single_file_error(self, tmp_path):
        """Test processing summary for a malformed file."""
        path = tmp_path / "bad.xml"
        path.write_text("<a>")
        result = XMLFileProcessor(CLIConfig()).process_single_file(path)

        assert result["success"] is False
        assert "Unclosed element <a>" in result["error"]


class TestArgumentParser:
    """Test command-line parsing."""

    def test_format_options(self):
        """Test style options are parsed."""
        parser = create_argument_parser()
        args = parser.parse_args(["format", "x.xml", "--write", "--print-width", "100", "--no-self-closing-space"])

        assert args.command == "format"
        assert args.paths == [Path("x.xml")]
        assert args.write is True
        assert args.print_width == 100
        assert args.self_closing_space is False
        assert args.sort_attributes is None

    def test_version(self, capsys):
        """Test --version exits after printing the version."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["--version"])

        assert "0.1.0" in capsys.readouterr().out


class TestMain:
    """Test the main entry point."""

    def test_no_command(self, capsys):
        """Test that help is printed without a command."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_format_to_stdout(self, xml_file, capsys):
        """Test formatted output is written to stdout."""
        assert main(["format", str(xml_file)]) == 0

        assert capsys.readouterr().out == "<a x='1'><b /></a>\n"
        assert xml_file.read_text(encoding="utf-8") == "<a  x='1'><b/></a>"

    def test_format_write(self, xml_file, capsys):
        """Test files are rewritten in place."""
        assert main(["format", "--write", "--preset", "readable", str(xml_file)]) == 0

        assert xml_file.read_text(encoding="utf-8") == "<a x='1'>\n  <b />\n</a>\n"
        assert f"Formatted: {xml_file}" in capsys.readouterr().err

    def test_format_options(self, xml_file, capsys):
        """Test style options reach the formatter."""
        assert main(["format", "--quote-attributes", "double", "--no-self-closing-space", str(xml_file)]) == 0
        assert capsys.readouterr().out == '<a x="1"><b/></a>\n'

    def test_format_syntax_error(self, tmp_path, capsys):
        """Test malformed files are reported."""
        path = tmp_path / "bad.xml"
        path.write_text("<a>")

        assert main(["format", str(path)]) == 1
        assert f"Error: {path}" in capsys.readouterr().err

    def test_no_files(self, tmp_path, capsys):
        """Test a directory without XML files."""
        assert main(["format", str(tmp_path)]) == 1
        assert "No XML files found" in capsys.readouterr().err

    def test_check(self, tmp_path, xml_file, capsys):
        """Test check exit codes and text output."""
        formatted = tmp_path / "ok.xml"
        formatted.write_text("<a />\n")

        assert main(["check", str(formatted)]) == 0
        assert f"✓ {formatted}" in capsys.readouterr().out

        assert main(["check", str(xml_file)]) == 1
        output = capsys.readouterr().out
        assert "Checked 1 files, 1 need formatting" in output
        assert f"✗ {xml_file}" in output

    def test_check_json(self, xml_file, capsys):
        """Test JSON check output."""
        assert main(["check", "--format", "json", str(xml_file)]) == 1

        results = json.loads(capsys.readouterr().out)
        assert results[0]["file"] == str(xml_file)
        assert results[0]["changed"] is True
        assert "formatted" not in results[0]

    def test_config_file(self, xml_file, tmp_path, capsys):
        """Test a configuration file is applied."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"printer": {"quote_attributes": "double"}}))

        assert main(["format", "--config", str(config_path), str(xml_file)]) == 0
        assert capsys.readouterr().out == '<a x="1"><b /></a>\n'

    def test_bad_config_file(self, xml_file, tmp_path, capsys):
        """Test configuration errors exit with status 2."""
        config_path = tmp_path / "config.json"
        config_path.write_text("{not json")

        assert main(["format", "--config", str(config_path), str(xml_file)]) == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_sort_attributes(self, tmp_path, capsys):
        """Test attribute sorting from the command line."""
        path = tmp_path / "doc.xml"
        path.write_text('<a b="1" xmlns="x"/>')

        assert main(["format", "--sort-attributes", str(path)]) == 0
        assert capsys.readouterr().out == '<a xmlns="x" b="1" />\n'
