# !/usr/bin/python
# coding=utf-8
import os
from typing import Any, Dict, Optional, Tuple

import yaml
import pythontk as ptk


# --------------------------------------------------------------------------------------------
# Exceptions
# --------------------------------------------------------------------------------------------


class UnityTkError(RuntimeError):
    """Base exception for unitytk operations."""

    pass


class MetaFileError(UnityTkError):
    """Raised when a ``.meta`` sidecar file cannot be read or parsed."""

    pass


# --------------------------------------------------------------------------------------------


class AssetUtils(ptk.HelpMixin):
    """Helpers for reading Unity asset sidecar (``.meta``) files and classifying assets."""

    META_EXT = ".meta"

    SHADER_EXTENSIONS = (".shader", ".shadergraph")
    TEXTURE_EXTENSIONS = (
        ".png",
        ".jpg",
        ".jpeg",
        ".tga",
        ".psd",
        ".tif",
        ".tiff",
        ".exr",
        ".hdr",
        ".bmp",
        ".gif",
        ".iff",
        ".pict",
        ".dds",
        ".rendertexture",
        ".cubemap",
    )

    # Never textures; anything else may be (e.g. a Texture2DArray saved as .asset).
    NON_TEXTURE_EXTENSIONS = SHADER_EXTENSIONS + (
        ".mat",
        ".prefab",
        ".unity",
        ".cs",
        ".fbx",
        ".obj",
        ".anim",
        ".controller",
        ".cginc",
        ".hlsl",
        ".compute",
        ".shadervariants",
    )

    @classmethod
    def get_asset_kind(cls, asset_path: str) -> str:
        """Classify an asset by its file extension.

        Returns:
            (str) 'shader', 'texture' or '' when the extension is not recognized.
        """
        ext = os.path.splitext(asset_path)[1].lower()
        if ext in cls.SHADER_EXTENSIONS:
            return "shader"
        if ext in cls.TEXTURE_EXTENSIONS:
            return "texture"
        return ""

    @classmethod
    def can_be_texture(cls, asset_path: str) -> bool:
        """False when the extension rules out a texture, e.g. a material or a shader."""
        ext = os.path.splitext(asset_path)[1].lower()
        return ext not in cls.NON_TEXTURE_EXTENSIONS

    @classmethod
    def is_meta_file(cls, path: str) -> bool:
        return path.lower().endswith(cls.META_EXT)

    @classmethod
    def meta_to_asset_path(cls, meta_path: str) -> str:
        """Strip the ``.meta`` suffix from a sidecar path."""
        if not cls.is_meta_file(meta_path):
            return meta_path
        return meta_path[: -len(cls.META_EXT)]

    @staticmethod
    def to_asset_path(file_path: str, project_root: str) -> str:
        """Return *file_path* relative to *project_root* using forward slashes.

        Example:
            >>> AssetUtils.to_asset_path('/proj/Assets/Tex/a.png', '/proj')
            'Assets/Tex/a.png'
        """
        rel = os.path.relpath(file_path, project_root)
        return rel.replace("\\", "/")

    @staticmethod
    def is_ignored_path(asset_path: str) -> bool:
        """True for paths inside hidden folders or folders ending in '~'.

        Unity skips these when importing, so they never become assets.
        """
        parts = asset_path.replace("\\", "/").split("/")
        for part in parts[:-1]:
            if part.startswith(".") or part.endswith("~"):
                return True
        name = parts[-1]
        return name.startswith(".")

    @staticmethod
    def load_meta(meta_path: str) -> Dict[str, Any]:
        """Parse a ``.meta`` file into a dict.

        ``yaml.BaseLoader`` is used so every scalar stays a string; GUIDs made of
        digits and empty bundle names would otherwise be coerced to ints or None.

        Raises:
            MetaFileError: If the file is unreadable, is not valid YAML, or is not a mapping.
        """
        try:
            with open(meta_path, "r", encoding="utf-8") as f:
                data = yaml.load(f, Loader=yaml.BaseLoader)
        except (OSError, UnicodeDecodeError) as error:
            raise MetaFileError(f"Unable to read '{meta_path}': {error}") from error
        except yaml.YAMLError as error:
            raise MetaFileError(f"Invalid YAML in '{meta_path}': {error}") from error

        if not isinstance(data, dict):
            raise MetaFileError(f"Meta file '{meta_path}' is not a mapping.")
        return data

    @staticmethod
    def get_importer_section(
        meta: Dict[str, Any]
    ) -> Tuple[Optional[str], Dict[str, Any]]:
        """Return the importer type name and its settings from parsed meta data.

        Returns:
            (tuple) (importer_type, settings) e.g. ('ShaderImporter', {...}),
                or (None, {}) if the meta holds no importer section.
        """
        for key, value in meta.items():
            if key.endswith("Importer") and isinstance(value, dict):
                return key, value
        return None, {}

    @staticmethod
    def is_folder_meta(meta: Dict[str, Any]) -> bool:
        return str(meta.get("folderAsset", "")).lower() == "yes"

    @staticmethod
    def get_string(settings: Dict[str, Any], key: str) -> str:
        """Read a string setting, mapping missing or non-scalar values to ''."""
        value = settings.get(key, "")
        return value if isinstance(value, str) else ""

    @staticmethod
    def parse_object_reference(ref: Any) -> str:
        """Return the GUID of a serialized object reference, or '' for a null reference.

        References look like ``{fileID: 2800000, guid: <32 hex>, type: 3}``.
        ``{instanceID: 0}`` and ``fileID: 0`` both mean "nothing assigned".
        """
        if not isinstance(ref, dict):
            return ""
        if str(ref.get("fileID", "0")).strip() in ("", "0"):
            return ""
        guid = ref.get("guid", "")
        if not isinstance(guid, str):
            return ""
        guid = guid.strip().lower()
        if not guid or set(guid) == {"0"}:
            return ""
        return guid

    @classmethod
    def parse_default_textures(cls, settings: Dict[str, Any]) -> Dict[str, str]:
        """Map property names to texture GUIDs from a ShaderImporter's ``defaultTextures``.

        Unity serializes the list as single-key mappings::

            defaultTextures:
            - _MainTex: {fileID: 2800000, guid: 3f0c..., type: 3}
            - _BumpMap: {instanceID: 0}

        Unassigned slots map to ''.
        """
        entries = settings.get("defaultTextures") or []
        if isinstance(entries, dict):
            entries = [{k: v} for k, v in entries.items()]
        if not isinstance(entries, list):
            return {}

        result: Dict[str, str] = {}
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            for name, ref in entry.items():
                result[name] = cls.parse_object_reference(ref)
        return result
