# !/usr/bin/python
# coding=utf-8
import os
from typing import Any, Dict, Iterable, List, Optional

import pythontk as ptk

# from this package:
from unitytk.asset_utils._asset_utils import AssetUtils, UnityTkError, MetaFileError
from unitytk.asset_utils.importers import ShaderImporter, TextureAsset
from unitytk.mat_utils.shader_properties import ShaderProperties, ShaderProperty


class AssetCatalogError(UnityTkError):
    """Raised when a project cannot be catalogued."""

    pass


class AssetCatalog(ptk.LoggingMixin, ptk.HelpMixin):
    """Read-only index of a Unity project's assets built from their ``.meta`` files.

    Features:
    - Maps GUIDs to project-relative asset paths and back
    - Enumerates assets by kind ('shader', 'texture', 'folder')
    - Reads shader import settings including bound default textures
    - Resolves explicit and implicit (folder inherited) bundle names
    - Reads shader property schemas from ShaderLab source

    The index is built on construction and rebuilt by :meth:`refresh`.
    """

    search_folders = ("Assets",)

    def __init__(
        self,
        project_root: Optional[str] = None,
        search_folders: Optional[Iterable[str]] = None,
        log_level="WARNING",
    ):
        self.logger.setLevel(log_level)
        self.logger.set_log_prefix("[asset catalog] ")

        root = project_root or os.environ.get("UNITY_PROJECT_PATH") or os.getcwd()
        self.project_root = os.path.abspath(root)
        if search_folders is not None:
            self.search_folders = tuple(search_folders)

        if not os.path.isdir(self.project_root):
            raise AssetCatalogError(
                f"Project root does not exist: '{self.project_root}'"
            )
        if not any(os.path.isdir(d) for d in self._search_dirs()):
            raise AssetCatalogError(
                f"None of {list(self.search_folders)} found under '{self.project_root}'"
            )

        self._guid_to_path: Dict[str, str] = {}
        self._path_to_guid: Dict[str, str] = {}
        self._metas: Dict[str, Dict[str, Any]] = {}
        self.refresh()

    def _search_dirs(self) -> List[str]:
        return [os.path.join(self.project_root, f) for f in self.search_folders]

    def __len__(self):
        return len(self._metas)

    def __contains__(self, asset_path: str):
        return asset_path in self._metas

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Rebuild the index from the ``.meta`` files currently on disk."""
        self._guid_to_path = {}
        self._path_to_guid = {}
        self._metas = {}

        for search_dir in self._search_dirs():
            if not os.path.isdir(search_dir):
                self.logger.debug(f"Search folder not found, skipping: {search_dir}")
                continue

            meta_files = ptk.get_dir_contents(
                search_dir, "filepath", recursive=True, inc_files=["*.meta"]
            )
            for meta_file in sorted(str(f) for f in meta_files):
                self._index_meta(meta_file)

        self.logger.debug(f"Indexed {len(self._metas)} assets.")

    def _index_meta(self, meta_file: str) -> None:
        if not AssetUtils.is_meta_file(meta_file) or not os.path.isfile(meta_file):
            return

        file_path = AssetUtils.meta_to_asset_path(meta_file)
        asset_path = AssetUtils.to_asset_path(file_path, self.project_root)
        if AssetUtils.is_ignored_path(asset_path):
            return
        if not os.path.exists(file_path):
            self.logger.debug(f"Orphaned meta file, skipping: {meta_file}")
            return

        try:
            meta = AssetUtils.load_meta(meta_file)
        except MetaFileError as error:
            self.logger.warning(str(error))
            return

        guid = AssetUtils.get_string(meta, "guid").strip().lower()
        if not guid:
            self.logger.warning(f"Meta file has no guid: {meta_file}")
            return
        if guid in self._guid_to_path:
            self.logger.warning(
                f"Duplicate guid {guid}: '{asset_path}' conflicts with "
                f"'{self._guid_to_path[guid]}', keeping the first."
            )
            return

        self._guid_to_path[guid] = asset_path
        self._path_to_guid[asset_path] = guid
        self._metas[asset_path] = meta

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_absolute_path(self, asset_path: str) -> str:
        return os.path.join(self.project_root, *asset_path.split("/"))

    def get_asset_kind(self, asset_path: str) -> str:
        """Return 'folder', 'shader', 'texture' or '' for *asset_path*."""
        meta = self._metas.get(asset_path)
        if meta is not None and AssetUtils.is_folder_meta(meta):
            return "folder"
        return AssetUtils.get_asset_kind(asset_path)

    def find_assets(self, kind: str = "shader") -> List[str]:
        """Return the GUIDs of all assets of the given kind, ordered by asset path.

        Parameters:
            kind: 'shader', 'texture' or 'folder'. A 't:' prefix is accepted,
                e.g. 't:Shader', to match the editor's search syntax.
        """
        kind = kind.lower()
        if kind.startswith("t:"):
            kind = kind[2:]

        return [
            self._path_to_guid[path]
            for path in self._metas
            if self.get_asset_kind(path) == kind
        ]

    def guid_to_asset_path(self, guid: str) -> str:
        """Return the asset path for *guid*, or '' if the GUID is unknown."""
        return self._guid_to_path.get((guid or "").lower(), "")

    def asset_path_to_guid(self, asset_path: str) -> str:
        return self._path_to_guid.get(asset_path, "")

    def get_meta(self, asset_path: str) -> Optional[Dict[str, Any]]:
        return self._metas.get(asset_path)

    def load_texture(self, guid: str) -> Optional[TextureAsset]:
        """Resolve a texture reference by GUID.

        Returns:
            (TextureAsset) or None when the GUID is empty or unknown, or names a
                folder or an asset that cannot be a texture.
        """
        asset_path = self.guid_to_asset_path(guid)
        if not asset_path or self.get_asset_kind(asset_path) == "folder":
            return None
        if not AssetUtils.can_be_texture(asset_path):
            self.logger.debug(f"Default texture reference is not a texture: {asset_path}")
            return None
        return TextureAsset(guid=guid.lower(), asset_path=asset_path)

    def get_importer(self, asset_path: str) -> Optional[ShaderImporter]:
        """Return the shader import settings for *asset_path*.

        Returns:
            (ShaderImporter) or None if the asset is unknown or not imported by a ShaderImporter.
        """
        meta = self._metas.get(asset_path)
        if meta is None:
            return None

        importer_type, settings = AssetUtils.get_importer_section(meta)
        if importer_type != "ShaderImporter":
            self.logger.debug(
                f"'{asset_path}' is imported by {importer_type}, not ShaderImporter."
            )
            return None

        default_textures = {
            name: self.load_texture(guid) if guid else None
            for name, guid in AssetUtils.parse_default_textures(settings).items()
        }
        return ShaderImporter(
            asset_path=asset_path,
            guid=self._path_to_guid[asset_path],
            bundle_name=AssetUtils.get_string(settings, "assetBundleName"),
            bundle_variant=AssetUtils.get_string(settings, "assetBundleVariant"),
            default_textures=default_textures,
        )

    # ------------------------------------------------------------------
    # Bundles
    # ------------------------------------------------------------------

    def get_bundle_name(self, asset_path: str) -> str:
        """Return the bundle name explicitly assigned to *asset_path* ('' if none)."""
        meta = self._metas.get(asset_path)
        if meta is None:
            return ""
        _, settings = AssetUtils.get_importer_section(meta)
        return AssetUtils.get_string(settings, "assetBundleName")

    def get_implicit_bundle_name(self, asset_path: str) -> str:
        """Return the bundle *asset_path* ends up in.

        This is the asset's own bundle name, or the nearest enclosing folder's
        when the asset has none, or '' if nothing up the hierarchy is assigned.
        """
        path = asset_path
        while path:
            bundle_name = self.get_bundle_name(path)
            if bundle_name:
                return bundle_name
            path = path.rpartition("/")[0]
        return ""

    # ------------------------------------------------------------------
    # Shaders
    # ------------------------------------------------------------------

    def get_shader_properties(self, asset_path: str) -> List[ShaderProperty]:
        """Return the declared property schema of a ShaderLab shader.

        Non-ShaderLab shaders and unreadable files yield an empty list.
        """
        if not asset_path.lower().endswith(".shader"):
            return []
        return ShaderProperties.from_file(self.get_absolute_path(asset_path))
