"""
Quality negotiation: compress, show, ask, and try again 5 points higher until
the human is happy with what they see.
"""

import enum
import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Callable, Optional, TextIO

from responsive_bg.tools import Tools, format_size

QUALITY_STEP = 5
YES_ANSWERS = {"y", "yes"}


class State(enum.Enum):
    NEGOTIATING = "negotiating"
    ACCEPTED = "accepted"


def ask_yes_no(prompt: str, stdin: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> bool:
    """
    Prompt on stderr (stdout carries the CSS) and read one line.
    Only "y"/"yes" in any case count as yes. Closed stdin raises EOFError.
    """
    stdin = stdin or sys.stdin
    stderr = stderr or sys.stderr
    stderr.write(prompt)
    stderr.flush()
    line = stdin.readline()
    if line == "":
        raise EOFError("stdin closed while waiting for an answer")
    return line.strip().lower() in YES_ANSWERS


def confirm_quality(path: Path, quality: int) -> bool:
    return ask_yes_no(f"Does {path.name} look good at quality {quality}? [y/N] ")


def negotiate_quality(
    source: Path,
    out_dir: Path,
    base_name: str,
    quality: int,
    tools: Tools,
    confirm: Callable[[Path, int], bool] = confirm_quality,
) -> Path:
    """
    Returns the accepted <out_dir>/<base_name>.jpg. There is no upper bound on
    quality; the loop ends only when confirm() says yes.
    """
    data = source.read_bytes()
    target = out_dir / f"{base_name}.jpg"
    state = State.NEGOTIATING

    while state is State.NEGOTIATING:
        compressed = tools.compress(data, quality)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{base_name}-q{quality}-", suffix=".jpg", dir=out_dir)
        tmp = Path(tmp_name)
        with os.fdopen(fd, "wb") as f:
            f.write(compressed)
        print(f"TRY   quality={quality} {tmp} ({format_size(tmp.stat().st_size)})", file=sys.stderr)

        tools.preview(tmp)
        if confirm(tmp, quality):
            os.replace(tmp, target)
            state = State.ACCEPTED
        else:
            tmp.unlink()
            quality += QUALITY_STEP

    print(f"DONE  {target} quality={quality} ({format_size(target.stat().st_size)})", file=sys.stderr)
    return target


def copy_optimized(optimized: Path, out_dir: Path, base_name: str) -> Path:
    """Use an already optimised image as is, keeping its extension."""
    target = out_dir / f"{base_name}{optimized.suffix}"
    if target.exists() and target.resolve() == optimized.resolve():
        print(f"SKIP  {target} already in place", file=sys.stderr)
    else:
        shutil.copy2(optimized, target)
        print(f"COPY  {optimized} -> {target} ({format_size(target.stat().st_size)})", file=sys.stderr)
    return target
