# !/usr/bin/python
# coding=utf-8
"""Shader property parsing and the shader default-texture bundle audit.

All classes are lazy-loaded via unitytk root package.
Import from unitytk directly: from unitytk import ShaderCleaner, ShaderProperties, etc.
"""

# Lazy-loaded via parent package - no explicit imports needed
