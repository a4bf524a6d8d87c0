#!/usr/bin/env python3

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from json_schema_to_model.cli_utils import reconstruct_command_line
from json_schema_to_model.json_schema_to_model import default_package_name, json_schema_to_model

GLTF_ROOT = str(Path(__file__).parent / "test_data" / "gltf" / "glTF.schema.json")


class TestCli:
    """Test cases for the command line interface"""

    def test_dry_run_lists_classes(self, tmp_path):
        out_dir = tmp_path / "out"
        result = CliRunner().invoke(json_schema_to_model, ["--dry-run", "-p", "gltf", GLTF_ROOT, str(out_dir)])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "gltf.Accessor" in lines
        assert "gltf.GlTF" in lines
        assert any(line.startswith("    file://") and line.endswith("accessor.schema.json") for line in lines)
        assert not out_dir.exists()

    def test_write(self, tmp_path):
        out_dir = tmp_path / "out"
        result = CliRunner().invoke(json_schema_to_model, ["-p", "gltf", GLTF_ROOT, str(out_dir)])
        assert result.exit_code == 0, result.output
        source = (out_dir / "gltf.py").read_text()
        assert "class Accessor(GlTFChildOfRootProperty):" in source
        assert "Generated by: json_schema_to_model glTF.schema.json" in source
        assert "--package gltf" in source

    def test_default_package(self, tmp_path):
        out_dir = tmp_path / "out"
        result = CliRunner().invoke(json_schema_to_model, [GLTF_ROOT, str(out_dir)])
        assert result.exit_code == 0, result.output
        assert (out_dir / "gltf.py").exists()

    def test_header(self, tmp_path):
        header = tmp_path / "header.txt"
        header.write_text("# Licensed under the Apache License, Version 2.0\n")
        out_dir = tmp_path / "out"
        result = CliRunner().invoke(json_schema_to_model, ["--header", str(header), GLTF_ROOT, str(out_dir)])
        assert result.exit_code == 0, result.output
        assert (out_dir / "gltf.py").read_text().startswith("# Licensed under the Apache License, Version 2.0\n")

    def test_config_file(self, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(
            json.dumps(
                {
                    "inputs": [{"url": GLTF_ROOT, "package_name": "configured"}],
                    "create_adders_and_removers": True,
                    "class_name_overrides": {"GlTF": "Gltf"},
                }
            )
        )
        out_dir = tmp_path / "out"
        result = CliRunner().invoke(json_schema_to_model, ["-c", str(config), str(out_dir)])
        assert result.exit_code == 0, result.output
        source = (out_dir / "configured.py").read_text()
        assert "class Gltf(GlTFProperty):" in source
        assert "def add_accessors(self, element: Accessor) -> None:" in source

    def test_missing_root(self, tmp_path):
        result = CliRunner().invoke(json_schema_to_model, [str(tmp_path / "missing.json"), str(tmp_path / "out")])
        assert result.exit_code == 1
        assert "Could not load" in result.output

    def test_too_many_packages(self, tmp_path):
        result = CliRunner().invoke(json_schema_to_model, ["-p", "a", "-p", "b", GLTF_ROOT, str(tmp_path / "out")])
        assert result.exit_code == 2

    def test_no_inputs(self, tmp_path):
        result = CliRunner().invoke(json_schema_to_model, [str(tmp_path / "out")])
        assert result.exit_code == 2
        assert "No input schemas given" in result.output

    def test_unknown_dialect(self, tmp_path):
        result = CliRunner().invoke(json_schema_to_model, ["--dialect", "draft-07", GLTF_ROOT, str(tmp_path / "out")])
        assert result.exit_code == 2


@pytest.mark.parametrize(
    "location,expected",
    [
        ("schemas/glTF.schema.json", "gltf"),
        ("https://example.com/schemas/Asset.Schema.json", "asset"),
        ("https://example.com/", "model"),
    ],
)
def test_default_package_name(location, expected):
    assert default_package_name(location) == expected


def test_reconstruct_command_line_without_context():
    """Test command reconstruction without active Click context (fallback)"""
    assert reconstruct_command_line(json_schema_to_model) == "json_schema_to_model"
