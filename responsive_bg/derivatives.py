"""
Width-scaled derivatives of the optimised image, and the breakpoints they give.

Breakpoints keep the order of the requested widths. The stylesheet relies on
that order for the cascade, so nothing here sorts them.
"""

import os
import re
import sys
from pathlib import Path
from typing import List, Sequence

from responsive_bg.tools import Tools, format_size

# "<anything>-<digits>.jpg|png" as left by an earlier run
VARIANT_RE = re.compile(r"^.+-(?P<width>\d+)\.(?:jpg|png)$")


def variant_name(base_name: str, width: int, ext: str) -> str:
    return f"{base_name}-{width}.{ext}"


def select_breakpoints(widths: Sequence[int], source_width: int) -> List[int]:
    """Widths strictly below the source width (no upscaling), in input order."""
    return [w for w in widths if w < source_width]


def generate_derivatives(
    image: Path,
    widths: Sequence[int],
    out_dir: Path,
    base_name: str,
    ext: str,
    tools: Tools,
) -> List[int]:
    width, height = tools.measure(image)
    print(f"SIZE  {image} [{width}x{height}]", file=sys.stderr)

    breakpoints = select_breakpoints(widths, width)
    for w in breakpoints:
        dst = out_dir / variant_name(base_name, w, ext)
        tools.resize(image, w, dst)
        print(f"DONE  {dst} ({format_size(dst.stat().st_size)})", file=sys.stderr)
    return breakpoints


def scan_breakpoints(out_dir: Path) -> List[int]:
    """Widths of derivatives already on disk, in directory listing order."""
    breakpoints: List[int] = []
    for name in os.listdir(out_dir):
        m = VARIANT_RE.match(name)
        if m:
            breakpoints.append(int(m.group("width")))
    return breakpoints
