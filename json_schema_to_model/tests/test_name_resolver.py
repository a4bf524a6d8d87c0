"""
Unit tests for class and field name derivation.
"""

import unittest

from json_schema_to_model.errors import NameDerivationError
from json_schema_to_model.pipeline.analyzer.name_resolver import (
    beautify,
    capitalize,
    clean_up,
    derive_class_name,
    make_valid_identifier,
)
from json_schema_to_model.utils import camel_to_snake_case


class TestClassNames(unittest.TestCase):
    def test_file_name(self):
        self.assertEqual(derive_class_name(["file:///s/accessor.schema.json"]), "Accessor")
        self.assertEqual(derive_class_name(["https://example.com/s/glTF.schema.json"]), "GlTF")
        self.assertEqual(derive_class_name(["file:///s/camera.json"]), "Camera")

    def test_definition(self):
        self.assertEqual(derive_class_name(["file:///s/common.json#/definitions/vector3"]), "Vector3")
        self.assertEqual(derive_class_name(["file:///s/common.json#/$defs/color"]), "Color")

    def test_fragment_is_appended(self):
        name = derive_class_name(["file:///s/glTF.schema.json#/properties/asset"])
        self.assertEqual(name, "GlTFPropertiesAsset")

    def test_prefers_uri_without_fragment(self):
        uris = [
            "file:///s/glTF.schema.json#/properties/asset",
            "file:///s/asset.schema.json",
        ]
        self.assertEqual(derive_class_name(uris), "Asset")

    def test_prefers_shortest_uri_without_fragment(self):
        uris = [
            "file:///s/deeper/path/textureInfo.schema.json",
            "file:///s/info.schema.json",
        ]
        self.assertEqual(derive_class_name(uris), "Info")

    def test_shortest_uri_with_fragment(self):
        uris = [
            "file:///s/common.json#/definitions/longerName",
            "file:///s/common.json#/definitions/short",
        ]
        self.assertEqual(derive_class_name(uris), "Short")

    def test_vendor_prefix(self):
        name = derive_class_name(["file:///s/KHR_materials_clearcoat.schema.json"])
        self.assertEqual(name, "MaterialsClearcoat")
        name = derive_class_name(["file:///s/material.KHR_materials_clearcoat.schema.json"])
        self.assertEqual(name, "MaterialMaterialsClearcoat")

    def test_leading_digit(self):
        self.assertEqual(derive_class_name(["file:///s/3dtiles.json"]), "_3dtiles")

    def test_empty_uris(self):
        with self.assertRaises(NameDerivationError):
            derive_class_name([])


class TestNameHelpers(unittest.TestCase):
    def test_capitalize(self):
        self.assertEqual(capitalize("glTF"), "GlTF")
        self.assertEqual(capitalize(""), "")

    def test_clean_up(self):
        self.assertEqual(clean_up("GlTF/properties/asset"), "GlTFPropertiesAsset")
        self.assertEqual(clean_up("a b-c"), "aBC")

    def test_beautify(self):
        self.assertEqual(beautify("KHR_texture_transform"), "TextureTransform")
        self.assertEqual(beautify("EXT_mesh_gpu_instancing"), "MeshGpuInstancing")

    def test_make_valid_identifier(self):
        self.assertEqual(make_valid_identifier("byteOffset"), "byteOffset")
        self.assertEqual(make_valid_identifier("class"), "class_")
        self.assertEqual(make_valid_identifier("3d-mode"), "_3dmode")
        self.assertEqual(make_valid_identifier("$ref"), "ref")
        self.assertEqual(make_valid_identifier("-"), "_")

    def test_camel_to_snake_case(self):
        self.assertEqual(camel_to_snake_case("byteOffset"), "byte_offset")
        self.assertEqual(camel_to_snake_case("URIType"), "uri_type")
        self.assertEqual(camel_to_snake_case("additionalProperties"), "additional_properties")
        self.assertEqual(camel_to_snake_case("KHR_texture_transform"), "khr_texture_transform")


if __name__ == "__main__":
    unittest.main()
