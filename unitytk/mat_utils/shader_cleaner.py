# !/usr/bin/python
# coding=utf-8
"""Audit shader default textures against bundle assignments.

A shader's import settings can bind *default* textures to its texture
properties. Those textures are packaged wherever their own bundle assignment
puts them, so a shader and its default textures can end up in different
bundles (or one assigned and the other not). This module finds those shaders.

Usage::

    cleaner = ShaderCleaner(project_root="C:/Projects/MyGame")
    reports = cleaner.scan_all()
    for report in reports.mismatched():
        print(report.describe())
"""
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import pythontk as ptk

# from this package:
from unitytk.asset_utils._asset_utils import UnityTkError
from unitytk.asset_utils.asset_catalog import AssetCatalog
from unitytk.asset_utils.importers import ShaderImporter, TextureAsset


@dataclass(frozen=True)
class TextureProperty:
    """A texture slot declared by a shader and the default texture bound to it, if any."""

    property_name: str
    display_name: str = ""
    texture: Optional[TextureAsset] = None
    bundle_name: str = ""
    dimension: Optional[str] = None

    @property
    def is_bound(self) -> bool:
        return self.texture is not None


@dataclass(frozen=True)
class ShaderReport:
    """A shader with at least one bound default texture.

    Attributes:
        shader: Asset path of the shader.
        bundle_name: The shader's own bundle name ('' when unassigned).
        properties: Bound texture properties in declared order.
        guid: The shader's GUID.
    """

    shader: str
    bundle_name: str
    properties: Tuple[TextureProperty, ...]
    guid: str = ""

    def has_mismatch(self) -> bool:
        return ShaderCleaner.has_mismatch(self)

    @property
    def mismatched_properties(self) -> Tuple[TextureProperty, ...]:
        return tuple(p for p in self.properties if p.bundle_name != self.bundle_name)

    def describe(self) -> str:
        """Multi-line summary of the shader and its default textures."""
        lines = [f"Shader: {self.shader} (bundle: {self.bundle_name})"]
        for prop in self.properties:
            lines.append(
                f"\t{prop.property_name}, {prop.texture} (bundle: {prop.bundle_name})"
            )
        return "\n".join(lines)


class ReportSet(Sequence):
    """Immutable, ordered collection of :class:`ShaderReport` from a single scan."""

    def __init__(self, reports: Iterable[ShaderReport] = ()):
        self._reports = tuple(reports)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ReportSet(self._reports[index])
        return self._reports[index]

    def __len__(self):
        return len(self._reports)

    def __eq__(self, other):
        if not isinstance(other, ReportSet):
            return NotImplemented
        return self._reports == other._reports

    def __hash__(self):
        return hash(self._reports)

    def __repr__(self):
        return f"{self.__class__.__name__}({list(self._reports)!r})"

    def mismatched(self) -> "ReportSet":
        """Return only the reports whose textures disagree with the shader's bundle."""
        return ReportSet(r for r in self._reports if ShaderCleaner.has_mismatch(r))

    def find(self, shader: str) -> Optional[ShaderReport]:
        """Return the report for the shader at asset path *shader*, or None."""
        return next((r for r in self._reports if r.shader == shader), None)


class ShaderCleaner(ptk.LoggingMixin, ptk.HelpMixin):
    """Finds shaders whose default textures live in a different bundle than the shader.

    Parameters:
        catalog: Asset catalog to scan. Any object providing ``find_assets``,
            ``guid_to_asset_path``, ``get_importer``, ``get_implicit_bundle_name``
            and ``get_shader_properties`` can be used.
        project_root: Used to build an :class:`AssetCatalog` when *catalog* is not given.
        log_level: Logging level for this instance.
    """

    def __init__(
        self, catalog=None, project_root: Optional[str] = None, log_level="WARNING"
    ):
        self.logger.setLevel(log_level)
        self.logger.set_log_prefix("[shader cleaner] ")

        if catalog is None:
            catalog = AssetCatalog(project_root, log_level=log_level)
        self.catalog = catalog

    def extract_texture_properties(
        self, shader_path: str, importer: ShaderImporter, catalog=None
    ) -> List[TextureProperty]:
        """Read every texture property of a shader along with its default texture.

        Non-texture properties are skipped. Properties without a default are kept
        with ``texture=None`` and an empty bundle name.

        Parameters:
            shader_path: Asset path of the shader.
            importer: The shader's import settings.
            catalog: Catalog used to resolve schemas and bundle names. Defaults to ``self.catalog``.

        Returns:
            (list) TextureProperty in declared order.
        """
        catalog = catalog if catalog is not None else self.catalog

        properties = []
        for prop in catalog.get_shader_properties(shader_path):
            if not prop.is_texture:
                continue

            texture = importer.get_default_texture(prop.name)
            bundle_name = ""
            if texture is not None:
                bundle_name = catalog.get_implicit_bundle_name(texture.asset_path)

            properties.append(
                TextureProperty(
                    property_name=prop.name,
                    display_name=prop.display_name,
                    texture=texture,
                    bundle_name=bundle_name,
                    dimension=prop.dimension,
                )
            )
        return properties

    def build_report(
        self, shader_path: str, importer: ShaderImporter, catalog=None
    ) -> Optional[ShaderReport]:
        """Build the report for one shader.

        Returns:
            (ShaderReport) or None if the shader has no bound default texture.
        """
        properties = self.extract_texture_properties(shader_path, importer, catalog)
        bound = tuple(p for p in properties if p.is_bound)
        if not bound:
            return None

        return ShaderReport(
            shader=shader_path,
            bundle_name=importer.bundle_name,
            properties=bound,
            guid=importer.guid,
        )

    @staticmethod
    def has_mismatch(report: ShaderReport) -> bool:
        """True if any default texture's bundle differs from the shader's.

        The comparison is exact: case-sensitive and with '' treated as a regular value,
        so an unassigned shader with an unassigned texture is not a mismatch.
        """
        return any(p.bundle_name != report.bundle_name for p in report.properties)

    def scan_all(self, catalog=None) -> ReportSet:
        """Scan every shader in the catalog.

        Shaders without a bound default texture are left out. Assets whose import
        settings cannot be resolved are skipped.

        Returns:
            (ReportSet) Reports in catalog enumeration order.
        """
        catalog = catalog if catalog is not None else self.catalog

        refresh = getattr(catalog, "refresh", None)
        if callable(refresh):
            refresh()

        guids = catalog.find_assets("shader")
        self.logger.info(f"Found shaders: {len(guids)}")

        reports = []
        for guid in guids:
            shader_path = catalog.guid_to_asset_path(guid)
            if not shader_path:
                self.logger.debug(f"Unresolved shader guid, skipping: {guid}")
                continue

            try:
                importer = catalog.get_importer(shader_path)
            except UnityTkError as error:
                self.logger.debug(f"Skipping '{shader_path}': {error}")
                continue
            if importer is None:
                self.logger.debug(f"No shader importer for '{shader_path}', skipping.")
                continue

            report = self.build_report(shader_path, importer, catalog)
            if report is None:
                continue

            self.logger.debug(report.describe())
            reports.append(report)

        self.logger.info(f"Shaders with default maps: {len(reports)}")
        return ReportSet(reports)
