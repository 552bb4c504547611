"""Rewrite composition scripts so the host page can intercept path resolution.

Each rewrite is a detector plus a substitution: when the call site is not
found (or was already rewritten by an earlier run) the text is left as is.
The host runtime is expected to define a global ``EdgeSuite`` object whose
hooks receive the original arguments plus the original function.
"""

from __future__ import annotations

import re
from pathlib import Path

import structlog

from edge_suite.workspace import read_script, write_script

log = structlog.get_logger("edge_suite.build")

HOOK_OBJECT = "EdgeSuite"

# Not preceded by an identifier char or '.', so hook calls and qualified names
# such as ``AdobeEdge.registerCompositionDefn`` inside a hook argument never match.
_NOT_QUALIFIED = r"(?<![\w.$])"

_REGISTER_RE = re.compile(
    _NOT_QUALIFIED
    + r"((?:Adobe)?Edge)\.registerCompositionDefn\(\s*"
    r"(compId\s*,\s*symbols\s*,\s*fonts\s*,\s*resources(?:\s*,\s*opts)?)\s*\)"
)
_LOAD_RESOURCES_RE = re.compile(
    _NOT_QUALIFIED + r"AdobeEdge\.loadResources\(\s*aLoader\s*,\s*doDelayLoad\s*\)"
)
_OK_TO_LAUNCH_RE = re.compile(
    _NOT_QUALIFIED + r"AdobeEdge\.okToLaunchComposition\(\s*compId\s*\)"
)

DOM_CONTENT_REFS = ("preContent", "dlContent")


def _closing_wrapper_re(stage_id: str) -> re.Pattern[str]:
    return re.compile(r"""\}\)\(\s*(["'])""" + re.escape(stage_id) + r"""\1\s*\)\s*;""")


def _dom_hook_re(stage_id: str) -> re.Pattern[str]:
    return re.compile(
        re.escape(HOOK_OBJECT) + r"""\.domContent\(\s*"""
        + r"""(["'])""" + re.escape(stage_id) + r"""\1"""
    )


def alter_entry_text(content: str) -> tuple[str, bool]:
    """Route ``Edge.registerCompositionDefn(...)`` through the host hook."""

    def _replace(m: re.Match[str]) -> str:
        alias, args = m.group(1), m.group(2)
        return f"{HOOK_OBJECT}.registerCompositionDefn({args}, {alias}.registerCompositionDefn)"

    altered, count = _REGISTER_RE.subn(_replace, content)
    return altered, count > 0


def alter_preloader_text(content: str, stage_id: str) -> tuple[str, bool]:
    """Apply the three preloader rewrites to one buffer.

    Returns the new text and whether the ``loadResources`` call was found.
    """
    content, loaded = _LOAD_RESOURCES_RE.subn(
        f"{HOOK_OBJECT}.loadResources(aLoader, doDelayLoad, AdobeEdge.loadResources)",
        content,
    )
    content = _OK_TO_LAUNCH_RE.sub(
        f"{HOOK_OBJECT}.okToLaunchComposition(compId, AdobeEdge.okToLaunchComposition)",
        content,
    )

    if stage_id and not _dom_hook_re(stage_id).search(content):
        hooks = "".join(
            f'{HOOK_OBJECT}.domContent("{stage_id}", {ref});\n' for ref in DOM_CONTENT_REFS
        )
        content = _closing_wrapper_re(stage_id).sub(
            lambda m: hooks + m.group(0), content, count=1
        )

    return content, loaded > 0


class ScriptRewriter:
    """Rewrite the entry and preloader scripts in place."""

    def rewrite_entry(self, entry_script: Path) -> bool:
        """Return True when the registration call was rewritten."""
        content = read_script(entry_script)
        altered, changed = alter_entry_text(content)
        if changed:
            write_script(entry_script, altered)
            log.info("rewriter.entry_altered", script=entry_script.name)
        else:
            log.info("rewriter.entry_unchanged", script=entry_script.name)
        return changed

    def rewrite_preloader(self, preloader_script: Path, stage_id: str) -> bool:
        """Return True when the ``loadResources`` call was rewritten."""
        content = read_script(preloader_script)
        altered, loaded = alter_preloader_text(content, stage_id)
        if altered != content:
            write_script(preloader_script, altered)
        log.info(
            "rewriter.preloader",
            script=preloader_script.name,
            load_resources_altered=loaded,
            changed=altered != content,
        )
        return loaded
