"""
Name resolver for generated classes and fields.

Class names are derived from the URIs that identify a schema: the file
name of the schema document, or the name of a definition. Vendor
prefixes of extension names (``KHR_``, ``EXT_``, ...) are dropped and
the remaining parts are joined in PascalCase.
"""

from __future__ import annotations

import keyword
import logging
from urllib.parse import unquote

from ...errors import NameDerivationError
from ..repository.uris import extract_schema_name, fragment_of, has_fragment

logger = logging.getLogger(__name__)

# Prefixes of registered extension names
VENDOR_PREFIXES = (
    "KHR",
    "EXT",
    "3DTILES",
    "ADOBE",
    "AGI",
    "AGT",
    "ALCM",
    "ALI",
    "AMZN",
    "ANIMECH",
    "ASOBO",
    "AVR",
    "BLENDER",
    "CAPTURE",
    "CESIUM",
    "CITRUS",
    "CLO",
    "CVTOOLS",
    "EPIC",
    "FB",
    "FOXIT",
    "GOOGLE",
    "GRIFFEL",
    "KDAB",
    "LLQ",
    "MAXAR",
    "MESHOPT",
    "MOZ",
    "MPEG",
    "MSFT",
    "NV",
    "OFT",
    "OMI",
    "OWLII",
    "PANDA3D",
    "POLUTROPON",
    "PTC",
    "S8S",
    "SEIN",
    "SI",
    "SKFB",
    "SKYLINE",
    "SPECTRUM",
    "TRYON",
    "UX3D",
    "VRMC",
    "WEB3D",
)

_DEFINITION_MARKERS = ("#/definitions/", "#/$defs/")


def capitalize(text: str) -> str:
    """Upper-case the first character and keep the rest."""
    return text[:1].upper() + text[1:]


def clean_up(name: str) -> str:
    """
    Remove characters that are not valid in an identifier.

    The character after a removed one is upper-cased, so that
    ``"GlTF/properties/asset"`` becomes ``"GlTFPropertiesAsset"``.
    """
    result = []
    capitalize_next = False
    for c in name:
        if c.isalnum() or c == "_":
            result.append(c.upper() if capitalize_next else c)
            capitalize_next = False
        else:
            capitalize_next = True
    return "".join(result)


def beautify(name: str) -> str:
    """
    Drop vendor prefixes and join underscore-separated parts.

    Example:
        "KHR_materials_clearcoat" -> "MaterialsClearcoat"
    """
    for prefix in VENDOR_PREFIXES:
        name = name.replace(prefix + "_", "_")
    result = []
    capitalize_next = False
    for c in name:
        if c == "_":
            capitalize_next = True
            continue
        result.append(c.upper() if capitalize_next else c)
        capitalize_next = False
    return "".join(result)


def _strip_suffix(text: str, suffix: str) -> str:
    if text.endswith(suffix):
        return text[: -len(suffix)]
    return text


def _class_name_for_uri(uri: str) -> str:
    for marker in _DEFINITION_MARKERS:
        index = uri.find(marker)
        if index >= 0:
            name = capitalize(unquote(uri[index + len(marker) :]))
            break
    else:
        file_name = extract_schema_name(uri)
        file_name = _strip_suffix(file_name, ".json")
        file_name = _strip_suffix(file_name, ".schema")
        name = capitalize(file_name)
        if has_fragment(uri):
            name += unquote(fragment_of(uri))
    name = beautify(clean_up(name))
    if not name:
        return "Anonymous"
    if name[0].isdigit():
        name = "_" + name
    return name


def derive_class_name(uris: list[str]) -> str:
    """
    Derive a class name from the URIs that identify a schema.

    A URI without a fragment is preferred, the shortest one if there
    are several. If there is none, the shortest URI is used.

    Args:
        uris: The URIs of the schema

    Returns:
        The class name

    Raises:
        NameDerivationError: If the list of URIs is empty
    """
    if not uris:
        raise NameDerivationError("Can not derive a class name from an empty set of URIs")
    if len(uris) == 1:
        return _class_name_for_uri(uris[0])
    without_fragment = [uri for uri in uris if not has_fragment(uri)]
    if len(without_fragment) > 1:
        logger.warning("Multiple URIs without fragment, using the shortest one: %s", without_fragment)
    if not without_fragment:
        logger.debug("No URI without fragment in %s, using the shortest one", uris)
        return _class_name_for_uri(min(uris, key=len))
    return _class_name_for_uri(min(without_fragment, key=len))


def make_valid_identifier(name: str) -> str:
    """
    Turn a JSON property name into a valid Python identifier.

    Invalid characters are dropped, and keywords get a trailing underscore.

    Examples:
        "byteOffset" -> "byteOffset"
        "class" -> "class_"
        "3d-mode" -> "_3dmode"
    """
    result = "".join(c for c in name if c.isalnum() or c == "_")
    if not result:
        result = "_"
    if result[0].isdigit():
        result = "_" + result
    if keyword.iskeyword(result):
        result += "_"
    return result
