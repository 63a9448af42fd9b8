"""Reader for the newline-delimited access code file."""

from __future__ import annotations

from pathlib import Path
from typing import List

from ..errors import SourceReadError


def read_access_codes(path: str | Path) -> List[str]:
    """Return the non-blank, stripped lines of the codes file.

    Raises:
        SourceReadError: If the file cannot be read.
    """

    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceReadError(f"cannot read codes file {path}: {exc}") from exc
    return [line.strip() for line in text.splitlines() if line.strip()]


__all__ = ["read_access_codes"]
