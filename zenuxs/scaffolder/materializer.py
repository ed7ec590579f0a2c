"""Write a rendered ``TemplateOutput`` to disk."""

from __future__ import annotations

from pathlib import Path

from .errors import UnsafePathError
from .models import TemplateOutput


def materialize(root: str | Path, output: TemplateOutput) -> list[Path]:
    """Write every file of *output* under *root*.

    Parent directories are created as needed and existing files are
    overwritten, so running twice against the same root yields the same
    tree.  A target that resolves outside *root* (for instance through a
    symlinked directory) raises ``UnsafePathError``; other I/O errors
    propagate unchanged and already-written files are left in place.

    Returns:
        The written paths, in output order.
    """
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)
    resolved_root = root.resolve()

    written: list[Path] = []
    for file in output:
        target = (resolved_root / file.path).resolve()
        if not target.is_relative_to(resolved_root):
            raise UnsafePathError(f"Refusing to write outside {resolved_root}: {file.path}")

        target.parent.mkdir(parents=True, exist_ok=True)
        if file.is_binary:
            target.write_bytes(file.content)
        else:
            target.write_text(file.content, encoding="utf-8", newline="")
        written.append(target)

    return written
