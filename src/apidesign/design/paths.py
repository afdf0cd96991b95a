from __future__ import annotations

import posixpath
import re

# `:name` matches one segment, `*name` matches the rest of the path
_WILDCARD = re.compile(r"/(?::|\*)([a-zA-Z0-9_]+)")
_MULTI_SLASH = re.compile(r"/{2,}")


def extract_wildcards(path: str) -> list[str]:
    """Wildcard names in `path`, in order of appearance, without duplicates."""
    out: list[str] = []
    for m in _WILDCARD.finditer(path or ""):
        name = m.group(1)
        if name not in out:
            out.append(name)
    return out


def clean_path(path: str) -> str:
    """
    Canonical form of a URL path:
      - always rooted
      - no repeated slashes, "." or ".." segments
      - trailing slash kept (except on the root itself)
    """
    if not path:
        return "/"
    trailing = path.endswith("/") and path != "/"
    p = _MULTI_SLASH.sub("/", "/" + path)
    p = posixpath.normpath(p)
    if trailing and p != "/":
        p += "/"
    return p


def join_path(base: str, path: str) -> str:
    """Join like a file path: the result never keeps a trailing slash."""
    p = clean_path(f"{(base or '').rstrip('/')}/{(path or '').lstrip('/')}")
    if p != "/" and p.endswith("/"):
        p = p[:-1]
    return p
