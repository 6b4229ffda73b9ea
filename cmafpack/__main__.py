"""
Command-line interface for the cmafpack packaging pipeline
"""
import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import ENCODE_TIMEOUT, STORAGE_ROOT
from .encoding import FFmpegEncoder
from .exceptions import CmafpackError
from .formatting import print_error, print_header, print_info, print_ladder, print_success
from .ladder import plan_ladder
from .logging import configure_logging
from .pipeline import process_file
from .probe import probe_source
from .utils import check_dependencies

def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="Package a video into HLS and DASH adaptive bitrate renditions"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set logging level (default from config)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=ENCODE_TIMEOUT,
        help="Per-rendition encode timeout in seconds (default: %(default)s)"
    )
    parser.add_argument(
        "--plan-only",
        dest="plan_only",
        action="store_true",
        help="Probe the source and print the planned ladder without encoding"
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Source video file"
    )
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=STORAGE_ROOT,
        help="Output root; renditions go to <output>/<input stem> (default: %(default)s)"
    )
    return parser.parse_args(argv)

def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)
    configure_logging(args.log_level)

    log = logging.getLogger("cmafpack")
    print_header(f"cmafpack v{__version__}")

    if not args.input.is_file():
        log.error("Input %s does not exist", args.input)
        return 1

    try:
        check_dependencies()
        if args.plan_only:
            source = probe_source(args.input)
            print_info(f"Source: {source.width}x{source.height}, {source.duration:.2f}s")
            print_ladder(plan_ladder(source))
            return 0

        summary = process_file(args.input, args.output, encoder=FFmpegEncoder(timeout=args.timeout))
        if summary:
            print_success(f"Successfully packaged {args.input.name}")
            return 0
    except KeyboardInterrupt:
        log.warning("Packaging interrupted by user")
        return 130
    except CmafpackError as e:
        log.error("%s", e)
        return 1

    print_error(f"Packaging failed for {args.input.name}")
    return 1

if __name__ == "__main__":
    sys.exit(main())
