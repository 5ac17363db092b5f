# !/usr/bin/python
# coding=utf-8
"""
Test Suite for unitytk.asset_utils.asset_catalog

Tests for AssetCatalog including:
- Project validation and configuration
- GUID indexing, enumeration and refresh
- Shader importer resolution with default textures
- Explicit and implicit bundle names
"""
import os
import unittest
from unittest.mock import patch

from base_test import UnityTkTestCase, SCRIPTED_META, new_guid
from unitytk.asset_utils.asset_catalog import AssetCatalog, AssetCatalogError
from unitytk.asset_utils._asset_utils import UnityTkError
from unitytk.asset_utils.importers import TextureAsset


class TestCatalogSetup(UnityTkTestCase):
    def test_missing_project_root(self):
        with self.assertRaises(AssetCatalogError):
            AssetCatalog(os.path.join(self.project_root, "nope"))

    def test_missing_search_folders(self):
        with self.assertRaises(AssetCatalogError):
            AssetCatalog(self.project_root, search_folders=["Packages"])

    def test_error_hierarchy(self):
        self.assertTrue(issubclass(AssetCatalogError, UnityTkError))
        self.assertTrue(issubclass(AssetCatalogError, RuntimeError))

    def test_project_root_from_environment(self):
        with patch.dict(os.environ, {"UNITY_PROJECT_PATH": self.project_root}):
            catalog = AssetCatalog()
        self.assertEqual(catalog.project_root, os.path.abspath(self.project_root))

    def test_extra_search_folders(self):
        os.makedirs(self.abs_path("Packages/com.studio.fx"))
        guid = self.create_texture("Packages/com.studio.fx/T_Spark.png")
        catalog = AssetCatalog(self.project_root, search_folders=["Assets", "Packages"])
        self.assertEqual(catalog.guid_to_asset_path(guid), "Packages/com.studio.fx/T_Spark.png")


class TestIndexing(UnityTkTestCase):
    def test_guid_lookup(self):
        guid = self.create_texture("Assets/Textures/T_Rock.png")
        catalog = AssetCatalog(self.project_root)

        self.assertEqual(catalog.guid_to_asset_path(guid), "Assets/Textures/T_Rock.png")
        self.assertEqual(catalog.guid_to_asset_path(guid.upper()), "Assets/Textures/T_Rock.png")
        self.assertEqual(catalog.asset_path_to_guid("Assets/Textures/T_Rock.png"), guid)
        self.assertEqual(catalog.guid_to_asset_path(new_guid()), "")
        self.assertIn("Assets/Textures/T_Rock.png", catalog)

    def test_find_assets_by_kind(self):
        b = self.create_shader("Assets/Shaders/B.shader")
        a = self.create_shader("Assets/Shaders/A.shader")
        tex = self.create_texture("Assets/Textures/T_Rock.png")
        folder = self.create_folder("Assets/Shaders")
        catalog = AssetCatalog(self.project_root)

        self.assertEqual(catalog.find_assets("shader"), [a, b])
        self.assertEqual(catalog.find_assets("t:Shader"), [a, b])
        self.assertEqual(catalog.find_assets("texture"), [tex])
        self.assertEqual(catalog.find_assets("folder"), [folder])

    def test_ignored_and_orphaned_metas(self):
        self.create_texture("Assets/Samples~/T_Hidden.png")
        self.create_texture("Assets/.cache/T_Hidden.png")
        self.write_meta("Assets/T_Gone.png", "fileFormatVersion: 2\nguid: " + new_guid() + "\n")
        catalog = AssetCatalog(self.project_root)
        self.assertEqual(len(catalog), 0)

    def test_broken_meta_is_skipped(self):
        self.write_file("Assets/T_Bad.png", b"")
        self.write_meta("Assets/T_Bad.png", "guid: [oops")
        self.write_file("Assets/T_NoGuid.png", b"")
        self.write_meta("Assets/T_NoGuid.png", "fileFormatVersion: 2\n")
        good = self.create_texture("Assets/T_Good.png")

        catalog = AssetCatalog(self.project_root)
        self.assertEqual(catalog.find_assets("texture"), [good])

    def test_duplicate_guid_keeps_first(self):
        guid = self.create_texture("Assets/A.png")
        self.write_file("Assets/B.png", b"")
        with open(self.abs_path("Assets/A.png.meta")) as f:
            self.write_meta("Assets/B.png", f.read())

        catalog = AssetCatalog(self.project_root)
        self.assertEqual(catalog.guid_to_asset_path(guid), "Assets/A.png")
        self.assertNotIn("Assets/B.png", catalog)

    def test_refresh_picks_up_changes(self):
        catalog = AssetCatalog(self.project_root)
        self.assertEqual(catalog.find_assets("texture"), [])

        guid = self.create_texture("Assets/T_New.png")
        self.assertEqual(catalog.find_assets("texture"), [])
        catalog.refresh()
        self.assertEqual(catalog.find_assets("texture"), [guid])


class TestImporters(UnityTkTestCase):
    def test_shader_importer(self):
        tex = self.create_texture("Assets/Textures/T_Rock_D.png")
        missing = new_guid()
        self.create_shader(
            "Assets/Shaders/Rock.shader",
            [("_MainTex", "Albedo", "2D"), ("_BumpMap", "Normal", "2D"), ("_Mask", "Mask", "2D")],
            default_textures={"_MainTex": tex, "_BumpMap": None, "_Mask": missing},
            bundle_name="rocks",
        )
        catalog = AssetCatalog(self.project_root)
        importer = catalog.get_importer("Assets/Shaders/Rock.shader")

        self.assertEqual(importer.bundle_name, "rocks")
        self.assertEqual(importer.bundle_variant, "")
        self.assertEqual(
            importer.get_default_texture("_MainTex"),
            TextureAsset(guid=tex, asset_path="Assets/Textures/T_Rock_D.png"),
        )
        self.assertEqual(importer.get_default_texture("_MainTex").name, "T_Rock_D")
        self.assertIsNone(importer.get_default_texture("_BumpMap"))
        self.assertIsNone(importer.get_default_texture("_Mask"))
        self.assertIsNone(importer.get_default_texture("_Undeclared"))

    def test_non_texture_defaults_are_unbound(self):
        tex = self.create_texture("Assets/Textures/T_Rock_D.png")
        mat = new_guid()
        self.write_file("Assets/Materials/M_Rock.mat", "%YAML 1.1\n")
        self.write_meta(
            "Assets/Materials/M_Rock.mat",
            f"fileFormatVersion: 2\nguid: {mat}\nNativeFormatImporter:\n"
            "  mainObjectFileID: 2100000\n  assetBundleName: rocks\n  assetBundleVariant:\n",
        )
        other = self.create_shader("Assets/Shaders/Other.shader", [("_A", "A", "2D")])
        self.create_shader(
            "Assets/Shaders/Rock.shader",
            [("_MainTex", "Albedo", "2D"), ("_Mat", "Mat", "2D"), ("_Shader", "Shader", "2D")],
            default_textures={"_MainTex": tex, "_Mat": mat, "_Shader": other},
        )
        catalog = AssetCatalog(self.project_root)
        importer = catalog.get_importer("Assets/Shaders/Rock.shader")

        self.assertIsNotNone(importer.get_default_texture("_MainTex"))
        self.assertIsNone(importer.get_default_texture("_Mat"))
        self.assertIsNone(importer.get_default_texture("_Shader"))
        self.assertIsNone(catalog.load_texture(mat))
        self.assertTrue(catalog.load_texture(tex))

    def test_non_shader_importers(self):
        self.create_texture("Assets/T_Rock.png")
        guid = new_guid()
        self.write_file("Assets/Lit.shadergraph", "{}")
        self.write_meta("Assets/Lit.shadergraph", SCRIPTED_META.format(guid=guid, bundle_name=""))
        catalog = AssetCatalog(self.project_root)

        self.assertIsNone(catalog.get_importer("Assets/T_Rock.png"))
        self.assertIsNone(catalog.get_importer("Assets/Lit.shadergraph"))
        self.assertIsNone(catalog.get_importer("Assets/Unknown.shader"))
        self.assertIn(guid, catalog.find_assets("shader"))

    def test_shader_properties(self):
        self.create_shader(
            "Assets/Rock.shader", [("_Color", "Color", "Color"), ("_MainTex", "Albedo", "2D")]
        )
        catalog = AssetCatalog(self.project_root)
        props = catalog.get_shader_properties("Assets/Rock.shader")
        self.assertEqual([p.name for p in props], ["_Color", "_MainTex"])
        self.assertEqual(catalog.get_shader_properties("Assets/Lit.shadergraph"), [])


class TestBundles(UnityTkTestCase):
    def setUp(self):
        super().setUp()
        self.create_folder("Assets/Env", bundle_name="env")
        self.create_folder("Assets/Env/Rocks")
        self.create_texture("Assets/Env/Rocks/T_Rock.png")
        self.create_texture("Assets/Env/Rocks/T_Moss.png", bundle_name="moss")
        self.create_texture("Assets/Loose/T_Loose.png")
        self.catalog = AssetCatalog(self.project_root)

    def test_explicit_bundle(self):
        self.assertEqual(self.catalog.get_bundle_name("Assets/Env/Rocks/T_Moss.png"), "moss")
        self.assertEqual(self.catalog.get_bundle_name("Assets/Env/Rocks/T_Rock.png"), "")

    def test_implicit_bundle_inherits_from_folder(self):
        self.assertEqual(self.catalog.get_implicit_bundle_name("Assets/Env/Rocks/T_Rock.png"), "env")

    def test_implicit_bundle_prefers_own(self):
        self.assertEqual(self.catalog.get_implicit_bundle_name("Assets/Env/Rocks/T_Moss.png"), "moss")

    def test_unassigned(self):
        self.assertEqual(self.catalog.get_implicit_bundle_name("Assets/Loose/T_Loose.png"), "")
        self.assertEqual(self.catalog.get_implicit_bundle_name("Assets/Nope.png"), "")


if __name__ == "__main__":
    unittest.main(exit=False)
