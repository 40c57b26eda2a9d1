"""Helpers for turning caller-supplied names into safe relative paths."""

import os


def normalize_name(name: str) -> str:
    """Return ``name`` as a relative POSIX path that cannot climb upwards.

    Leading separators are stripped, and empty, ``.`` and ``..`` segments are
    dropped rather than resolved. Only ``/`` (and the platform separator,
    where it differs) splits segments; other characters stay in the name.

    Example:
        ``"/../a//./b.txt"`` becomes ``"a/b.txt"``
    """
    if os.sep != "/":
        name = name.replace(os.sep, "/")
    segments = [s for s in name.split("/") if s not in ("", ".", "..")]
    return "/".join(segments)


def join_folder(folder: str | None, name: str) -> str:
    """Prefix ``name`` with ``folder`` when one is given, then normalize."""
    if folder:
        name = f"{folder}/{name}"
    return normalize_name(name)


def key_basename(key: str) -> str:
    """Return everything after the last ``/`` of an object key."""
    return key[key.rfind("/") + 1 :]
