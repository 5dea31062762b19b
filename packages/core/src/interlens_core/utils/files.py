from __future__ import annotations

import fnmatch

NON_CODE_EXTENSIONS = {
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".svg",
    ".ico",
    ".pdf",
    ".woff",
    ".woff2",
    ".ttf",
    ".zip",
    ".jar",
    ".class",
    ".lock",
}


def is_code_file(file_name: str) -> bool:
    return not any(file_name.lower().endswith(ext) for ext in NON_CODE_EXTENSIONS)


def normalize_filename(file_name: str, extension: str = ".java") -> str:
    """Return ``file_name`` with the view's extension appended if it is missing."""
    if not extension or file_name.endswith(extension):
        return file_name
    return f"{file_name}{extension}"


def class_to_file(class_name: str, extension: str = ".java") -> str:
    """Map a fully-qualified class name to its source path.

    Nested classes (``Outer$Inner``) live in the outer class's file.
    """
    outer = class_name.split("$", 1)[0]
    return normalize_filename(outer.replace(".", "/"), extension)


def is_excluded(filename: str, patterns: list[str]) -> bool:
    """Return True if filename matches any exclude pattern.

    Supports:
    - fnmatch globs on the full path: "src/generated/*.java"
    - fnmatch globs on the basename: "*.lock"
    - Directory names/prefixes: "test/", "build" (matches any file within that tree)
    """
    for pattern in patterns:
        if fnmatch.fnmatch(filename, pattern):
            return True
        if fnmatch.fnmatch(filename.rsplit("/", 1)[-1], pattern):
            return True
        prefix = pattern.rstrip("/") + "/"
        if filename.startswith(prefix) or ("/" + prefix) in filename:
            return True
    return False


def match_path(file_name: str, paths) -> str | None:
    """Find the repository path an analyzer file name refers to.

    An exact match wins; otherwise the name must be the trailing path
    component(s) of exactly one candidate.
    """
    paths = list(paths)
    if file_name in paths:
        return file_name
    suffix = "/" + file_name.lstrip("/")
    matches = [p for p in paths if p.endswith(suffix)]
    return matches[0] if len(matches) == 1 else None
