# !/usr/bin/python
# coding=utf-8
"""ShaderLab ``Properties`` block parsing.

Only the property schema is read: name, display label and type. Default values
and attributes are ignored.
"""
import re
import logging
from dataclasses import dataclass
from typing import List, Optional

import pythontk as ptk

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShaderProperty:
    """One entry of a shader's property schema."""

    name: str
    display_name: str
    prop_type: str

    @property
    def is_texture(self) -> bool:
        return ShaderProperties.is_texture_type(self.prop_type)

    @property
    def dimension(self) -> Optional[str]:
        """Canonical texture dimension ('2D', '3D', 'Cube', ...) or None for non-texture properties."""
        return ShaderProperties.TEXTURE_TYPES.get(self.prop_type.lower())


class ShaderProperties(ptk.HelpMixin):
    """Extract the property schema from ShaderLab source."""

    # lower-case declaration type -> canonical dimension name
    TEXTURE_TYPES = {
        "2d": "2D",
        "3d": "3D",
        "cube": "Cube",
        "2darray": "2DArray",
        "cubearray": "CubeArray",
        "any": "Any",
    }

    # Strings are matched first so comment markers inside them survive.
    _COMMENT_RE = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/', re.DOTALL)
    # Strings again, so a 'Properties {' inside the shader name is never the block.
    _BLOCK_RE = re.compile(r'"(?:\\.|[^"\\])*"|\bProperties\s*\{')
    # Declarations are not line bound; several may share a line or one may span lines.
    _PROPERTY_RE = re.compile(
        r"""(?<![\w.])
        (?:\[[^\]]*\]\s*)*                  # [NoScaleOffset] [HDR] ...
        (?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*
        \(\s*"(?P<display>(?:\\.|[^"\\])*)"\s*,\s*
        (?P<type>[A-Za-z0-9]+)
        """,
        re.VERBOSE,
    )

    @classmethod
    def is_texture_type(cls, prop_type: str) -> bool:
        return prop_type.lower() in cls.TEXTURE_TYPES

    @classmethod
    def strip_comments(cls, source: str) -> str:
        def _replace(match):
            text = match.group(0)
            return text if text.startswith('"') else ""

        return cls._COMMENT_RE.sub(_replace, source)

    @classmethod
    def get_properties_block(cls, source: str) -> str:
        """Return the text between the braces of the first ``Properties`` block.

        Returns:
            (str) The block body, or '' if there is no block or its braces never close.
        """
        source = cls.strip_comments(source)
        match = next(
            (m for m in cls._BLOCK_RE.finditer(source) if not m.group(0).startswith('"')),
            None,
        )
        if not match:
            return ""

        start = match.end()
        depth = 1
        in_string = False
        for i in range(start, len(source)):
            char = source[i]
            if char == '"' and source[i - 1] != "\\":
                in_string = not in_string
            elif in_string:
                continue
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return source[start:i]
        return ""

    @classmethod
    def parse(cls, source: str) -> List[ShaderProperty]:
        """Parse ShaderLab source into an ordered list of properties.

        Example:
            >>> ShaderProperties.parse('Properties { _MainTex ("Albedo", 2D) = "white" {} }')
            [ShaderProperty(name='_MainTex', display_name='Albedo', prop_type='2D')]
        """
        block = cls.get_properties_block(source)
        if not block:
            return []

        properties = []
        seen = set()
        for match in cls._PROPERTY_RE.finditer(block):
            name = match.group("name")
            if name in seen:
                continue
            seen.add(name)
            properties.append(
                ShaderProperty(
                    name=name,
                    display_name=match.group("display").replace('\\"', '"'),
                    prop_type=match.group("type"),
                )
            )
        return properties

    @classmethod
    def from_file(cls, filepath: str) -> List[ShaderProperty]:
        """Parse a shader file; an unreadable file yields an empty schema."""
        try:
            with open(filepath, "r", encoding="utf-8", errors="replace") as f:
                source = f.read()
        except OSError as error:
            logger.debug(f"Unable to read shader '{filepath}': {error}")
            return []
        return cls.parse(source)
