import json
from pathlib import Path

import pytest

from json_schema_to_model.pipeline import GeneratorInput, PipelineGenerator
from json_schema_to_model.pipeline.analyzer.defaults import parse_default
from json_schema_to_model.pipeline.analyzer.ir_nodes import INTEGER, NUMBER, STRING, ClassType, CollectionType, MapType
from json_schema_to_model.pipeline.diagnostics import DiagnosticKind


def load_test_data():
    """Load test cases from JSON file"""
    test_data_path = Path(__file__).parent / "test_data" / "default_values_tests.json"
    with open(test_data_path) as f:
        return json.load(f)


def generate(tmp_path, test_case):
    schema = {"type": "object", "properties": {"value": test_case["schema"]}}
    if test_case.get("required"):
        schema["required"] = ["value"]
    path = tmp_path / "TestClass.json"
    path.write_text(json.dumps(schema))
    generator = PipelineGenerator([GeneratorInput(str(path), "defaults")])
    files = generator.generate()
    return generator, files["defaults.py"]


@pytest.mark.parametrize("test_case", load_test_data(), ids=lambda test_case: test_case["name"])
def test_default_values_python(tmp_path, test_case):
    """Test default value parsing and generation for Python"""
    generator, output = generate(tmp_path, test_case)

    (field_def,) = generator.model.get_class("TestClass").fields
    if "expected_default" in test_case:
        assert field_def.has_default
        assert field_def.default_value == test_case["expected_default"]
    else:
        assert not field_def.has_default
    diagnostics = generator.model.diagnostics.of_kind(DiagnosticKind.DEFAULT_VALUE)
    assert len(diagnostics) == test_case.get("expected_diagnostics", 0)

    # Check each expected pattern in the generated output
    for expected in test_case["expected_python"]:
        assert expected in output, f"Expected '{expected}' not found in output:\n{output}"


@pytest.mark.parametrize(
    "default_string,target_type,expected",
    [
        ("2", NUMBER, 2.0),
        ("2.0", INTEGER, 2),
        ('"a"', STRING, "a"),
        ("[[1, 2], [3]]", CollectionType(CollectionType(INTEGER)), [[1, 2], [3]]),
        ('{"x": [1.5]}', MapType(CollectionType(NUMBER)), {"x": [1.5]}),
    ],
)
def test_parse_default(default_string, target_type, expected):
    value = parse_default(default_string, target_type)
    assert value == expected
    assert type(value) is type(expected)


@pytest.mark.parametrize(
    "default_string,target_type",
    [
        ("true", INTEGER),
        ("2.5", INTEGER),
        ("1", STRING),
        ("not json", STRING),
        ('{"x": 1}', CollectionType(INTEGER)),
        ("{}", ClassType(name="Asset")),
    ],
)
def test_parse_default_rejects(default_string, target_type):
    with pytest.raises(ValueError):
        parse_default(default_string, target_type)
