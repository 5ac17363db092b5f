# !/usr/bin/python
# coding=utf-8
"""Asset catalog and ``.meta`` helpers for Unity projects.

All classes are lazy-loaded via unitytk root package.
Import from unitytk directly: from unitytk import AssetCatalog, AssetUtils, etc.
"""

# Lazy-loaded via parent package - no explicit imports needed
