"""
Tests for the Python backend: the generated modules are written, imported and used.
"""

import importlib
import json
import sys
from pathlib import Path

import pytest

from json_schema_to_model.pipeline import ClassGeneratorConfig, GeneratorInput, PipelineGenerator
from json_schema_to_model.pipeline.analyzer import INTEGER, ClassType, CollectionType, MapType, PrimitiveType
from json_schema_to_model.pipeline.backends import PythonBackend

GLTF_ROOT = str(Path(__file__).parent / "test_data" / "gltf" / "glTF.schema.json")


@pytest.fixture
def import_generated(tmp_path, monkeypatch):
    """Write the modules of a generator and return a function that imports them."""
    out_dir = tmp_path / "out"
    monkeypatch.syspath_prepend(str(out_dir))
    imported = []

    def _import(generator, module_name):
        generator.write(out_dir)
        importlib.invalidate_caches()
        imported.append(module_name)
        return importlib.import_module(module_name)

    yield _import
    for module_name in imported:
        sys.modules.pop(module_name, None)


def test_gltf_module(import_generated):
    gltf = import_generated(PipelineGenerator([GeneratorInput(GLTF_ROOT, "gltf_basic")]), "gltf_basic")

    asset = gltf.Asset(version="2.0")
    accessor = gltf.Accessor(componentType=5126, count=3, type="VEC3")
    assert accessor.byteOffset == 0
    assert accessor.normalized is False
    assert accessor.max is None
    root = gltf.GlTF(asset=asset, accessors=[accessor])
    assert root.extensionsUsed is None
    assert isinstance(root, gltf.GlTFProperty)
    assert gltf.__all__ == ["GlTFProperty", "GlTF", "Extension", "GlTFChildOfRootProperty", "Accessor", "Asset"]


@pytest.mark.parametrize(
    "factory,message",
    [
        (lambda m: m.Asset(version="two"), "version must match the pattern"),
        (lambda m: m.Asset(version=None), "version may not be null"),
        (lambda m: m.Accessor(componentType=5126, count=0, type="VEC3"), "count must be > 0"),
        (lambda m: m.Accessor(componentType=5126, count=1, type="VEC3", byteOffset=-4), "byteOffset must be >= 0"),
        (lambda m: m.Accessor(componentType=5126, count=1, type="VEC3", max=[]), "number of max elements must be >= 1"),
        (lambda m: m.GlTF(asset=m.Asset(version="2.0"), accessors=[]), "number of accessors elements must be >= 1"),
    ],
)
def test_gltf_validation(import_generated, factory, message):
    gltf = import_generated(PipelineGenerator([GeneratorInput(GLTF_ROOT, "gltf_validation")]), "gltf_validation")
    with pytest.raises(ValueError, match=message):
        factory(gltf)


def test_open_enum_is_not_enforced(import_generated):
    gltf = import_generated(PipelineGenerator([GeneratorInput(GLTF_ROOT, "gltf_open_enum")]), "gltf_open_enum")
    accessor = gltf.Accessor(componentType=9999, count=1, type="MAT4")
    assert accessor.componentType == 9999


def test_generated_source(tmp_path):
    generator = PipelineGenerator(
        [GeneratorInput(GLTF_ROOT, "gltf", header_code="# Copyright test\n")],
        generation_comment="json_schema_to_model glTF.schema.json out",
    )
    source = generator.generate()["gltf.py"]
    assert source.startswith("# Copyright test\n")
    assert "Generated by: json_schema_to_model glTF.schema.json out" in source
    assert "@dataclasses.dataclass(kw_only=True)\nclass Accessor(GlTFChildOfRootProperty):" in source
    assert "    count: int\n" in source
    assert "    extras: Any | None = None\n" in source
    assert "from typing import Any\n" in source
    assert "import re\n" in source
    assert "TYPE_CHECKING" not in source
    # Subclasses inherit __post_init__
    assert source.count("def __post_init__(self) -> None:") == 2
    assert source.count("        super().validate()") == 4


def test_required_fields_come_first(tmp_path):
    path = tmp_path / "point.json"
    path.write_text(
        json.dumps(
            {
                "type": "object",
                "properties": {"label": {"type": "string"}, "x": {"type": "number"}, "y": {"type": "number"}},
                "required": ["y", "x"],
            }
        )
    )
    source = PipelineGenerator([GeneratorInput(str(path), "")]).generate()["model.py"]
    assert source.index("x: float\n") < source.index("y: float\n") < source.index("label: str | None = None")


def test_accessor_methods(import_generated):
    config = ClassGeneratorConfig(create_adders_and_removers=True, create_getters_with_default=True)
    gltf = import_generated(PipelineGenerator([GeneratorInput(GLTF_ROOT, "gltf_methods")], config), "gltf_methods")

    root = gltf.GlTF(asset=gltf.Asset(version="1.0"))
    accessor = gltf.Accessor(componentType=5126, count=1, type="SCALAR", byteOffset=None)
    root.add_accessors(accessor)
    assert root.accessors == [accessor]
    root.remove_accessors(accessor)
    assert root.accessors == []
    assert accessor.get_byte_offset_or_default() == 0
    assert accessor.get_normalized_or_default() is False

    extension = gltf.Extension()
    extension.add_additional_properties("KHR_lights", {"lights": []})
    assert extension.additional_properties == {"KHR_lights": {"lights": []}}
    extension.remove_additional_properties("KHR_lights")
    assert extension.additional_properties == {}


def test_accessor_names_follow_field_names(tmp_path, import_generated):
    path = tmp_path / "labels.json"
    path.write_text(
        json.dumps(
            {
                "type": "object",
                "properties": {
                    "ok-name": {"type": "integer", "default": 3},
                    "tag-list": {"type": "array", "items": {"type": "string"}},
                },
            }
        )
    )
    config = ClassGeneratorConfig(create_adders_and_removers=True, create_getters_with_default=True)
    labels = import_generated(PipelineGenerator([GeneratorInput(str(path), "labels_methods")], config), "labels_methods")

    instance = labels.Labels(okname=None)
    assert instance.get_okname_or_default() == 3
    assert not hasattr(instance, "get_ok_name_or_default")
    instance.add_taglist("a")
    assert instance.taglist == ["a"]
    instance.remove_taglist("a")
    assert instance.taglist == []


def test_without_validation(import_generated):
    config = ClassGeneratorConfig(add_validation=False)
    gltf = import_generated(PipelineGenerator([GeneratorInput(GLTF_ROOT, "gltf_unchecked")], config), "gltf_unchecked")
    assert gltf.Accessor(componentType=5126, count=0, type="VEC3").count == 0
    assert not hasattr(gltf.Accessor, "validate")


def test_cross_package_imports(tmp_path, import_generated):
    schemas = {
        "a/one.json": {
            "type": "object",
            "allOf": [{"$ref": "../b/two.json"}],
            "properties": {"other": {"$ref": "../b/three.json"}},
        },
        "b/two.json": {"type": "object", "properties": {"x": {"type": "integer", "minimum": 1}}},
        "b/three.json": {"type": "object", "properties": {"y": {"type": "string"}}},
    }
    for name, schema in schemas.items():
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(schema))
    generator = PipelineGenerator(
        [GeneratorInput(str(tmp_path / "a" / "one.json"), "pkg_a"), GeneratorInput(str(tmp_path / "b" / "two.json"), "pkg_b")]
    )
    source = generator.generate()["pkg_a.py"]
    assert "\nfrom pkg_b import Two\n" in source
    assert "if TYPE_CHECKING:\n    from pkg_b import Three\n" in source

    import_generated(generator, "pkg_b")
    pkg_a = import_generated(generator, "pkg_a")
    assert pkg_a.One(x=2).x == 2
    with pytest.raises(ValueError, match="x must be >= 1"):
        pkg_a.One(x=0)


@pytest.mark.parametrize(
    "target_type,expected",
    [
        (INTEGER, "int"),
        (PrimitiveType("any"), "Any"),
        (PrimitiveType("numpy.float32"), "numpy.float32"),
        (CollectionType(MapType(INTEGER)), "list[dict[str, int]]"),
        (ClassType(name="Asset", package="gltf"), "Asset"),
    ],
)
def test_translate_type(target_type, expected):
    backend = PythonBackend(ClassGeneratorConfig())
    assert backend.translate_type(target_type, "gltf") == expected


@pytest.mark.parametrize(
    "package,expected",
    [
        ("gltf", "gltf.py"),
        ("gltf.extensions", "gltf/extensions.py"),
        ("", "model.py"),
    ],
)
def test_module_path(package, expected):
    assert PythonBackend(ClassGeneratorConfig()).module_path(package) == expected
