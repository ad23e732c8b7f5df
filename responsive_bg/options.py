"""
Command line flags and the resolved run configuration.

Defaults that are not given on the command line are derived from the source
file name (base name, CSS class) and the output directory (CSS URL path).
"""

import argparse
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import List, Optional, Sequence

DEFAULT_QUALITY = 50
DEFAULT_WIDTHS = [2048, 1440, 1024, 768]
DEFAULT_CJPEG = "cjpeg"

# Optional environment overrides for tool binaries
CJPEG_ENV = "RESPONSIVE_BG_CJPEG"
IMAGEMAGICK_ENV = "RESPONSIVE_BG_IMAGEMAGICK"


class UsageError(Exception):
    """Raised when the arguments cannot describe a run (no source image)."""


@dataclass
class Options:
    quality: int = DEFAULT_QUALITY
    widths: List[int] = field(default_factory=lambda: list(DEFAULT_WIDTHS))
    out_dir: Path = Path(".")
    base_name: str = ""
    css_class: str = ""
    orientation: Optional[str] = None
    css_path: str = ""
    source: Optional[Path] = None
    optimized: Optional[Path] = None
    resized: bool = False
    cjpeg_bin: str = DEFAULT_CJPEG
    imagemagick_bin: Optional[str] = None

    @property
    def extension(self) -> str:
        """Extension (without dot) of the full-size output image."""
        if self.optimized is not None:
            return self.optimized.suffix.lstrip(".")
        return "jpg"


def parse_widths(s: str) -> List[int]:
    """Parse "2048,1440,1024" keeping the given order."""
    try:
        widths = [int(x.strip()) for x in s.split(",") if x.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError("Invalid widths. Example: 2048,1440,1024,768")
    if not widths or any(w <= 0 for w in widths):
        raise argparse.ArgumentTypeError("Widths must be positive integers. Example: 2048,1440,1024,768")
    return widths


def default_css_path(out_dir: Path) -> str:
    """URL prefix for files written to out_dir, without trailing slash."""
    posix = out_dir.as_posix()
    if out_dir.is_absolute():
        return posix.rstrip("/")
    rel = str(PurePosixPath(posix))
    if rel == ".":
        return ""
    return "/" + rel.rstrip("/")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="responsive-bg",
        description="Compress an image until it looks right, make width-scaled copies and print CSS background rules for them.",
    )
    parser.add_argument("-q", "--quality", type=int, default=DEFAULT_QUALITY,
                        help=f"Starting JPEG quality, raised by 5 on each rejection (default: {DEFAULT_QUALITY})")
    parser.add_argument("-w", "--widths", type=parse_widths, default=list(DEFAULT_WIDTHS),
                        help="Comma-separated target widths in stylesheet order (default: 2048,1440,1024,768)")
    parser.add_argument("-d", "--dir", dest="out_dir", default=".",
                        help="Output directory (default: current directory)")
    parser.add_argument("-f", "--file", dest="base_name", default=None,
                        help="Output base file name (default: source name without extension)")
    parser.add_argument("-c", "--css-class", default=None,
                        help="CSS class name (default: source name without extension)")
    parser.add_argument("-o", "--orientation", default=None,
                        help='Wrap every rule in an orientation media query, e.g. "landscape"')
    parser.add_argument("-p", "--css-path", default=None,
                        help="URL path the images are served from (default: /<output directory>)")
    parser.add_argument("-O", "--optimized", default=None,
                        help="Already optimised image: copy it instead of asking for a quality")
    parser.add_argument("-D", "--resized", action="store_true",
                        help="Derivatives already exist: read widths from <name>-<width>.jpg|png in the output directory")
    parser.add_argument("--cjpeg-bin", default=os.environ.get(CJPEG_ENV, DEFAULT_CJPEG),
                        help=f"mozjpeg cjpeg binary (default: ${CJPEG_ENV} or {DEFAULT_CJPEG})")
    parser.add_argument("--imagemagick-bin", default=os.environ.get(IMAGEMAGICK_ENV),
                        help='ImageMagick binary. For example "convert" or "magick"')
    parser.add_argument("source", nargs="?", default=None, help="Source image")
    return parser


def resolve_options(argv: Optional[Sequence[str]] = None,
                    parser: Optional[argparse.ArgumentParser] = None) -> Options:
    parser = parser or build_parser()
    args = parser.parse_args(argv)

    if args.source is None and args.optimized is None:
        raise UsageError("a source image is required unless -O is given")

    source = Path(args.source) if args.source is not None else None
    optimized = Path(args.optimized) if args.optimized is not None else None
    stem = (source or optimized).stem
    out_dir = Path(args.out_dir)

    if args.css_path is not None:
        css_path = args.css_path.rstrip("/")
    else:
        css_path = default_css_path(out_dir)

    return Options(
        quality=args.quality,
        widths=list(args.widths),
        out_dir=out_dir,
        base_name=args.base_name or stem,
        css_class=args.css_class or stem,
        orientation=args.orientation or None,
        css_path=css_path,
        source=source,
        optimized=optimized,
        resized=args.resized,
        cjpeg_bin=args.cjpeg_bin,
        imagemagick_bin=args.imagemagick_bin,
    )
