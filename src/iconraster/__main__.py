import argparse
import logging
import sys
import xml.etree.ElementTree as ET

from iconraster import load_icon, save, size_from_sentinel
from iconraster.errors import IconRasterError

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Rasterize an SVG icon to PNG or JPEG")
    parser.add_argument("input", metavar="INPUT", type=str, help="Input SVG file path")
    parser.add_argument("output", metavar="PATH", type=str, help="Output image file.")
    parser.add_argument(
        "--width",
        metavar="PIXELS",
        type=float,
        default=-1,
        help="Output width. Default: viewBox width",
    )
    parser.add_argument(
        "--height",
        metavar="PIXELS",
        type=float,
        default=-1,
        help="Output height. Default: keep the viewBox aspect ratio",
    )
    parser.add_argument(
        "--format",
        metavar="FORMAT",
        type=str,
        choices=["png", "jpeg", "jpg"],
        default=None,
        help="Output format (png, jpeg). Default: from the output extension",
    )
    parser.add_argument(
        "--quality",
        metavar="Q",
        type=int,
        default=None,
        help="JPEG quality (1-95). Default: 75",
    )
    parser.add_argument(
        "--supersample",
        metavar="N",
        type=int,
        default=4,
        help="Anti-aliasing supersampling factor, 1 disables. Default: 4",
    )
    parser.add_argument(
        "--loglevel",
        metavar="LEVEL",
        default="WARNING",
        help="Logging level, default WARNING",
    )
    return parser.parse_args()


def main() -> None:
    """Main function to rasterize an SVG icon."""
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.loglevel.upper(), "WARNING"))
    try:
        icon = load_icon(args.input)
    except (OSError, ET.ParseError, ValueError) as e:
        logger.error("Cannot load %s: %s", args.input, e)
        sys.exit(1)
    try:
        warnings = save(
            icon,
            args.output,
            size_from_sentinel(icon.viewbox, args.width, args.height),
            image_format=args.format,
            quality=args.quality,
            supersample=args.supersample,
        )
    except IconRasterError as e:
        logger.error("%s", e)
        sys.exit(1)
    if warnings:
        logger.warning("%d path(s) could not be drawn", len(warnings))


if __name__ == "__main__":
    main()
