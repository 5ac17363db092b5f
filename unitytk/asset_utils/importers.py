# !/usr/bin/python
# coding=utf-8
"""Read-only records for assets and their import settings.

These mirror the handful of editor objects the shader audit needs:
a texture asset handle and the import settings of a shader.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class TextureAsset:
    """A texture asset identified by GUID and located at a project-relative path."""

    guid: str
    asset_path: str

    @property
    def name(self) -> str:
        """The asset name as the editor shows it: the file name without extension."""
        return os.path.splitext(os.path.basename(self.asset_path))[0]

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class ShaderImporter:
    """Import settings of a single shader asset.

    Attributes:
        asset_path: Project-relative path of the shader, e.g. 'Assets/Shaders/Rock.shader'.
        guid: The shader's GUID.
        bundle_name: The bundle explicitly assigned to the shader ('' when unassigned).
        bundle_variant: The bundle variant ('' when unassigned).
        default_textures: Property name -> bound default texture, or None for an empty slot.
    """

    asset_path: str
    guid: str
    bundle_name: str = ""
    bundle_variant: str = ""
    default_textures: Dict[str, Optional[TextureAsset]] = field(
        default_factory=dict, compare=False
    )

    def get_default_texture(self, property_name: str) -> Optional[TextureAsset]:
        """Return the default texture bound to *property_name*, or None."""
        return self.default_textures.get(property_name)
