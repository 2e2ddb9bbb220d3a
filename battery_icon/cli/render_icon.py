import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..models.configuration import Configuration
from ..models.errors import IconRenderError, InvalidArgumentError, MissingRequiredArgumentError
from ..pipeline.icon_renderer import render_icon_file

logger = logging.getLogger(__name__)


def _ratio(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number in [0, 1], got {raw!r}")
    if not 0.0 <= value <= 1.0:
        raise argparse.ArgumentTypeError(f"expected a number in [0, 1], got {raw!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="render-app-icon",
        description="Draw a black battery silhouette behind the dark glyph of an icon.",
        allow_abbrev=False,
    )
    ap.add_argument("--input", type=Path, default=None, help="source image (required)")
    ap.add_argument("--output", type=Path, default=None, help="destination PNG (required)")
    ap.add_argument("--threshold", type=_ratio, default=None,
                    help="glyph luminance threshold (default 0.40)")
    ap.add_argument("--battery-alpha", type=_ratio, default=None,
                    help="battery fill opacity (default 0.92)")
    ap.add_argument("--battery-image", type=Path, default=None,
                    help="optional battery silhouette image")
    ap.add_argument("--battery-threshold", type=_ratio, default=None,
                    help="background luminance threshold for the battery image (default 0.80)")
    ap.add_argument("--verbose", action="store_true", help="debug logging")
    return ap


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _log_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    raw = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if raw not in LOG_LEVELS:
        raise InvalidArgumentError(f"Invalid LOG_LEVEL: {raw!r} (expected one of {', '.join(LOG_LEVELS)})")
    return getattr(logging, raw)


def _configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stderr,
    )


def _require_paths(args: argparse.Namespace) -> None:
    if args.input is None:
        raise MissingRequiredArgumentError("Missing --input <path>")
    if args.output is None:
        raise MissingRequiredArgumentError("Missing --output <path>")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        _require_paths(args)
    except MissingRequiredArgumentError as err:
        parser.error(str(err))

    try:
        _configure_logging(_log_level(args.verbose))
        config = Configuration.from_env().with_overrides(
            glyph_threshold=args.threshold,
            battery_alpha=args.battery_alpha,
            battery_image_path=args.battery_image,
            battery_threshold=args.battery_threshold,
        )
        out = render_icon_file(args.input, args.output, config)
    except IconRenderError as err:
        logger.error(f"Render failed: {err}")
        print(f"error: {err}", file=sys.stderr)
        return 1

    print(f"Wrote {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
