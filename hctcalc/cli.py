"""Command line interface for hctcalc."""
import argparse
import logging
import sys
from typing import Optional

from hctcalc import __version__
from hctcalc.pipeline import HctPipeline
from hctcalc.types import ExtractionConfig, HctError

OUTPUT_TYPES = ("hue", "chroma", "tone")


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog='hctcalc',
        description='Print the hue, chroma or tone of the dominant color of an image',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hctcalc wallpaper.png hue
  hctcalc --size 64 wallpaper.png tone
  hctcalc -vv wallpaper.png chroma
        """,
    )

    parser.add_argument(
        'image_path',
        type=str,
        help='Input image path'
    )

    subparsers = parser.add_subparsers(
        dest='output_type',
        required=True,
        metavar='{hue,chroma,tone}',
        help='Component of the HCT color to print'
    )
    for name in OUTPUT_TYPES:
        subparsers.add_parser(name, help=f'Print the {name} of the dominant color')

    parser.add_argument(
        '--size',
        type=int,
        default=128,
        help='Sampling edge and palette size (default: 128)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Log progress (-v) or details (-vv) to stderr'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")


def main(args: Optional[list] = None) -> int:
    """Main entry point for CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    _configure_logging(parsed.verbose)

    try:
        config = ExtractionConfig(max_colors=parsed.size, bitmap_size=parsed.size)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        hct = HctPipeline(config).process(parsed.image_path)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except HctError as e:
        print(f"Error processing image: {e}", file=sys.stderr)
        return 1

    value = getattr(hct, parsed.output_type)
    print(f"{value:.0f}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
