"""
External tools: mozjpeg cjpeg for compression, ImageMagick for metadata and
resizing, and the platform viewer for previews.

Requires: mozjpeg (cjpeg), ImageMagick, Pillow
"""

import os
import shlex
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Optional, Protocol, Tuple

from PIL import Image

EXIT_NO_COMPRESSOR = 4
EXIT_NO_IMAGEMAGICK = 5

VIEWER_ENV = "RESPONSIVE_BG_VIEWER"


def format_size(bytes_val: int) -> str:
    if bytes_val < 1024:
        return f"{bytes_val} B"
    elif bytes_val < 1024 * 1024:
        return f"{bytes_val / 1024:.1f} KB"
    else:
        return f"{bytes_val / (1024 * 1024):.1f} MB"


# ---------- Probing ----------

def find_compressor(explicit: str = "cjpeg") -> Optional[str]:
    return shutil.which(explicit)


def find_imagemagick_bin(explicit: Optional[str] = None) -> Optional[Tuple[str, bool]]:
    """
    Returns (binary, requires_wrapper) for the first working ImageMagick,
    or None. "magick" needs "magick identify"/"magick convert" subcommands.
    """
    candidates = []
    if explicit:
        candidates.append(explicit)
    candidates += ["convert", "magick"]
    for exe in candidates:
        try:
            out = subprocess.run([exe, "-version"], capture_output=True, text=True)
        except (FileNotFoundError, PermissionError):
            continue
        if out.returncode == 0 and ("ImageMagick" in out.stdout or "ImageMagick" in out.stderr):
            requires_wrapper = Path(exe).name.startswith("magick")
            if not requires_wrapper and shutil.which("identify") is None:
                continue
            return exe, requires_wrapper
    return None


def probe_tools(opts) -> "ImageTools":
    """Check every external tool the run needs; exit before any work if one is missing."""
    cjpeg = None
    if opts.optimized is None:
        cjpeg = find_compressor(opts.cjpeg_bin)
        if cjpeg is None:
            print(f"Could not find {opts.cjpeg_bin}. Install mozjpeg or pass --cjpeg-bin, "
                  "or give an already optimised image with -O", file=sys.stderr)
            sys.exit(EXIT_NO_COMPRESSOR)

    found = find_imagemagick_bin(opts.imagemagick_bin)
    if found is None:
        print("Could not find ImageMagick (identify/convert). Install it or pass --imagemagick-bin", file=sys.stderr)
        sys.exit(EXIT_NO_IMAGEMAGICK)
    im_bin, requires_wrapper = found
    return ImageTools(cjpeg or opts.cjpeg_bin, im_bin, requires_wrapper)


# ---------- Adapters ----------

class Tools(Protocol):
    """What the pipeline needs from the outside world."""

    def compress(self, data: bytes, quality: int) -> bytes: ...

    def measure(self, path: Path) -> Tuple[int, int]: ...

    def resize(self, src: Path, width: int, dst: Path) -> Path: ...

    def preview(self, path: Path) -> None: ...


class ImageTools:
    """
    Subprocess-backed implementation of the four operations the pipeline needs:
    compress, measure, resize and preview. Tests substitute an object with the
    same methods.
    """

    def __init__(self, cjpeg_bin: str, im_bin: str, requires_wrapper: bool) -> None:
        self.cjpeg_bin = cjpeg_bin
        self.im_bin = im_bin
        self.requires_wrapper = requires_wrapper

    def _im_cmd(self, tool: str) -> list:
        if self.requires_wrapper:
            return [self.im_bin, tool]
        if tool == "identify":
            return ["identify"]
        return [self.im_bin]

    def compress(self, data: bytes, quality: int) -> bytes:
        cmd = [self.cjpeg_bin, "-quality", str(quality), "-optimize", "-progressive"]
        proc = subprocess.run(cmd, input=data, capture_output=True, check=True)
        return proc.stdout

    def identify_size(self, path: Path) -> Optional[Tuple[int, int]]:
        cmd = self._im_cmd("identify") + ["-format", "%w %h", f"{path}[0]"]
        proc = subprocess.run(cmd, capture_output=True, text=True)
        if proc.returncode == 0:
            parts = proc.stdout.strip().split()
            if len(parts) == 2 and parts[0].isdigit() and parts[1].isdigit():
                return int(parts[0]), int(parts[1])
        return None

    def measure(self, path: Path) -> Tuple[int, int]:
        try:
            with Image.open(path) as im:
                return im.size
        except Exception:
            # unreadable by Pillow or over its decompression-bomb limit
            size = self.identify_size(path)
        if size is None:
            raise RuntimeError(f"Could not read the size of {path}")
        return size

    def resize(self, src: Path, width: int, dst: Path) -> Path:
        cmd = self._im_cmd("convert") + [str(src), "-resize", f"{width}x", str(dst)]
        subprocess.run(cmd, capture_output=True, check=True)
        return dst

    def preview(self, path: Path) -> None:
        viewer = os.environ.get(VIEWER_ENV)
        if viewer:
            subprocess.run(shlex.split(viewer) + [str(path)])
        elif sys.platform == "darwin":
            subprocess.run(["open", str(path)])
        elif sys.platform.startswith("win"):
            os.startfile(str(path))
        else:
            subprocess.run(["xdg-open", str(path)], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
