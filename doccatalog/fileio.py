from __future__ import annotations

import os
import stat
from pathlib import Path


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def replacement_mode(target: Path) -> int:
    """Mode a file replacing ``target`` should carry: the existing mode, else 0666 minus umask."""

    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_current_umask()


def match_target_mode(tmp_name: str, target: Path) -> None:
    # mkstemp creates 0600 files; os.replace would carry that onto the target
    os.chmod(tmp_name, replacement_mode(target))
