"""${ENV_VAR} substitution over parsed YAML trees.

Supports ``${NAME}`` and ``${NAME:-fallback}``. A reference with a fallback is
never reported as missing.
"""

import re
from collections.abc import Mapping
from typing import Any

_REFERENCE = re.compile(
    r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<fallback>[^}]*))?\}"
)


def find_unset_references(tree: Any, environ: Mapping[str, str]) -> list[str]:
    """Return every referenced variable without a value or fallback, in first-seen order."""
    unset: list[str] = []
    for text in _strings(tree):
        for ref in _REFERENCE.finditer(text):
            name = ref.group("name")
            if ref.group("fallback") is not None or name in environ:
                continue
            if name not in unset:
                unset.append(name)
    return unset


def substitute(tree: Any, environ: Mapping[str, str]) -> Any:
    """Return a copy of *tree* with references replaced.

    Call ``find_unset_references`` first; an unset reference here is a KeyError.
    """
    if isinstance(tree, str):
        return _REFERENCE.sub(lambda ref: _resolve(ref, environ), tree)
    if isinstance(tree, list):
        return [substitute(item, environ) for item in tree]
    if isinstance(tree, dict):
        return {key: substitute(value, environ) for key, value in tree.items()}
    return tree


def _resolve(ref: re.Match[str], environ: Mapping[str, str]) -> str:
    name = ref.group("name")
    fallback = ref.group("fallback")
    if fallback is not None:
        return environ.get(name) or fallback
    return environ[name]


def _strings(tree: Any):
    if isinstance(tree, str):
        yield tree
    elif isinstance(tree, list):
        for item in tree:
            yield from _strings(item)
    elif isinstance(tree, dict):
        for value in tree.values():
            yield from _strings(value)
