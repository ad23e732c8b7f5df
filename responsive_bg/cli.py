"""
Responsive background image preparation.

- Compresses the source with cjpeg, starting at -q and going up by 5 until you
  approve the preview (or copies an already optimised image given with -O).
- Writes <name>-<width>.<ext> for every requested width smaller than the image.
- Prints CSS to stdout: the full-size background rule first, then one
  max-width media query per width in the order given with -w.

Progress and prompts go to stderr, so stdout can be redirected to a .css file.

Requires: Python 3.8+, mozjpeg (cjpeg), ImageMagick, Pillow
"""

import sys
from typing import Callable, Optional, Sequence

from responsive_bg import tools as image_tools
from responsive_bg.derivatives import generate_derivatives, scan_breakpoints
from responsive_bg.negotiate import confirm_quality, copy_optimized, negotiate_quality
from responsive_bg.options import UsageError, build_parser, resolve_options
from responsive_bg.stylesheet import render_stylesheet

EXIT_OK = 0
EXIT_NO_SOURCE = 3


def main(
    argv: Optional[Sequence[str]] = None,
    tools: Optional[image_tools.Tools] = None,
    confirm: Optional[Callable] = None,
) -> int:
    parser = build_parser()
    try:
        opts = resolve_options(argv, parser)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return EXIT_NO_SOURCE

    if tools is None:
        tools = image_tools.probe_tools(opts)

    opts.out_dir.mkdir(parents=True, exist_ok=True)

    if opts.optimized is not None:
        image = copy_optimized(opts.optimized, opts.out_dir, opts.base_name)
    else:
        image = negotiate_quality(
            source=opts.source,
            out_dir=opts.out_dir,
            base_name=opts.base_name,
            quality=opts.quality,
            tools=tools,
            confirm=confirm or confirm_quality,
        )

    if opts.resized:
        breakpoints = scan_breakpoints(opts.out_dir)
    else:
        breakpoints = generate_derivatives(
            image=image,
            widths=opts.widths,
            out_dir=opts.out_dir,
            base_name=opts.base_name,
            ext=opts.extension,
            tools=tools,
        )

    sys.stdout.write(render_stylesheet(
        css_class=opts.css_class,
        css_path=opts.css_path,
        base_name=opts.base_name,
        ext=opts.extension,
        orientation=opts.orientation,
        breakpoints=breakpoints,
    ))
    return EXIT_OK
