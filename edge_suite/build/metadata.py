"""Metadata extraction from generated composition scripts.

The authoring tool emits the entry script in one of two shapes:

* pretty: the readable export, where the stage block looks like::

      "${_Stage}": [
         ["color", "background-color", 'rgba(255,255,255,1)'],
         ["style", "height", '280px'],
         ["style", "width", '600px']
      ],

* minified: short variable names and chained setters, e.g.::

      var g7='${_Stage}';
      ...A.A.A(g7).P(h,280,_,_,p).P(w,600,_,_,p).P(bG,'rgba(255,255,255,1)')

Neither is parsed as JavaScript; a fixed set of anchored patterns pulls out
the stage dimensions and the composition identifier.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import structlog

from edge_suite.exceptions import (
    CompanionDocumentMissingError,
    StageIdentifierNotFoundError,
)
from edge_suite.models.composition import UNIT_PERCENT, UNIT_PX, DimensionSet
from edge_suite.workspace import read_script

log = structlog.get_logger("edge_suite.build")

# ── pretty encoding ──

_PRETTY_STAGE_BLOCK_RE = re.compile(
    r"""(["'])\$\{_Stage\}\1\s*:\s*\[\s*(\[.*?\])\s*\]""",
    re.DOTALL,
)
_PRETTY_DIMENSION_RE = re.compile(
    r"""\[\s*"style"\s*,\s*"(width|height|min-width|max-width|min-height|max-height)"\s*,"""
    r"""\s*'([0-9]+(?:\.[0-9]+)?)(px|%)'\s*\]"""
)

# ── minified encoding ──

_MINIFIED_STAGE_VAR_RE = re.compile(r"""\b([A-Za-z][0-9]+)\s*=\s*(["'])\$\{_Stage\}\2""")
# One chained call; arguments may hold quoted strings with parentheses.
_CHAIN_CALL = r"""\s*\.\s*[A-Za-z_$][\w$]*\((?:[^()'"]|'[^']*'|"[^"]*")*\)"""
_MINIFIED_SETTER_RE = re.compile(
    r"""\.\s*P\(\s*([A-Za-z_$][\w$]*)\s*,\s*([0-9]+(?:\.[0-9]+)?)\s*"""
    r"""(?:,\s*_\s*,\s*_\s*,\s*("%"|'%'|[A-Za-z_$][\w$]*)\s*)?\)"""
)
_MINIFIED_KEYS = {"w": "width", "h": "height"}

# ── identifiers ──

_STAGE_ID_RE = re.compile(
    r"""\}\)\(\s*(jQuery|AdobeEdge\.\$)\s*,\s*AdobeEdge\s*,\s*"([^"]+)"\s*\)\s*;"""
)
_RUNTIME_URL_RE = re.compile(r"animate\.adobe\.com/runtime/(\d+\.\d+\.\d+)/")

ENCODING_PRETTY = "pretty"
ENCODING_MINIFIED = "minified"


@dataclass
class ScriptMetadata:
    stage_id: str
    dimensions: DimensionSet | None
    encoding: str | None


def parse_pretty_dimensions(content: str) -> DimensionSet | None:
    """Read dimensions from the ``"${_Stage}": [...]`` style block."""
    block = _PRETTY_STAGE_BLOCK_RE.search(content)
    if not block:
        return None

    dimensions = DimensionSet()
    found = False
    for key, value, unit in _PRETTY_DIMENSION_RE.findall(block.group(2)):
        dimensions.set(key, value, unit)
        found = True
    return dimensions if found else None


def parse_minified_dimensions(content: str) -> DimensionSet | None:
    """Read width/height from the setter chain of the minified stage variable.

    Only ``w`` and ``h`` are understood here; min/max constraints are not
    read from minified exports.
    """
    var_match = _MINIFIED_STAGE_VAR_RE.search(content)
    if not var_match:
        return None

    var = re.escape(var_match.group(1))
    chain_re = re.compile(r"\(\s*" + var + r"\s*\)((?:" + _CHAIN_CALL + r")+)")

    dimensions = DimensionSet()
    found = False
    for chain in chain_re.finditer(content):
        for key, value, marker in _MINIFIED_SETTER_RE.findall(chain.group(1)):
            name = _MINIFIED_KEYS.get(key)
            if name is None:
                continue
            if not marker or marker == "p":
                unit = UNIT_PX
            elif marker.strip("\"'") == "%":
                unit = UNIT_PERCENT
            else:
                continue
            dimensions.set(name, value, unit)
            found = True
        if found:
            break
    return dimensions if found else None


def parse_dimensions(content: str) -> tuple[DimensionSet | None, str | None]:
    """Try the pretty encoding, then the minified one; first success wins."""
    for encoding, parser in (
        (ENCODING_PRETTY, parse_pretty_dimensions),
        (ENCODING_MINIFIED, parse_minified_dimensions),
    ):
        dimensions = parser(content)
        if dimensions is not None:
            return dimensions, encoding
    return None, None


def parse_stage_id(content: str) -> str:
    """Return the identifier from the trailing ``})(jQuery, AdobeEdge, "<id>");``."""
    matches = _STAGE_ID_RE.findall(content)
    if not matches:
        raise StageIdentifierNotFoundError(
            "Unable to read the composition id from the main Edge file."
        )
    return matches[-1][1]


def parse_runtime_version(document: Path) -> str:
    """Read the runtime version from the companion HTML document.

    Returns an empty string when the document does not reference a
    versioned runtime URL.
    """
    if not document.is_file():
        raise CompanionDocumentMissingError(str(document))
    match = _RUNTIME_URL_RE.search(read_script(document))
    if not match:
        log.info("metadata.runtime_version_not_found", document=document.name)
        return ""
    return match.group(1)


class MetadataExtractor:
    """Extract stage dimensions and the composition id from an entry script."""

    def extract(self, entry_script: Path) -> ScriptMetadata:
        content = read_script(entry_script)
        return self.extract_from_text(content)

    def extract_from_text(self, content: str) -> ScriptMetadata:
        dimensions, encoding = parse_dimensions(content)
        if dimensions is None:
            log.warning("metadata.dimensions_not_found")
        else:
            log.debug("metadata.dimensions", encoding=encoding, dimensions=dimensions.as_dict())
        stage_id = parse_stage_id(content)
        return ScriptMetadata(stage_id=stage_id, dimensions=dimensions, encoding=encoding)
