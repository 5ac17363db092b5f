# !/usr/bin/python
# coding=utf-8
from pythontk.core_utils.module_resolver import bootstrap_package


__package__ = "unitytk"
__version__ = "0.1.0"

"""Dynamic Attribute Resolver for Module-based Packages

``bootstrap_package`` wires a :class:`ModuleAttributeResolver` into this package so classes
stay reachable as ``unitytk.<Name>`` while keeping this module lean.
"""

DEFAULT_INCLUDE = {
    # Asset utils
    "asset_utils._asset_utils": ["AssetUtils", "UnityTkError", "MetaFileError"],
    "asset_utils.importers": ["TextureAsset", "ShaderImporter"],
    "asset_utils.asset_catalog": ["AssetCatalog", "AssetCatalogError"],
    # Material utils
    "mat_utils.shader_properties": ["ShaderProperties", "ShaderProperty"],
    "mat_utils.shader_cleaner": [
        "ShaderCleaner",
        "ShaderReport",
        "TextureProperty",
        "ReportSet",
    ],
}

bootstrap_package(
    globals(),
    include=DEFAULT_INCLUDE,
)
