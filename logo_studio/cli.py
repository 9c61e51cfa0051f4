"""
Command-line logo studio.

  description
    -> (text model) written logo concept
    -> optional (image model) rendered PNG

Usage:
  logo-studio --prompt "A minimalist logo for 'kaar'" --style Vintage
  logo-studio --image --out-dir ./logos
  logo-studio --remaining

Each run counts against a daily limit kept in LOGO_USAGE_FILE.
"""

import argparse
import getpass
import sys
from typing import List, Optional

from . import config
from .logging import get_logger, setup_logging
from .services.error_classifier import DailyLimitReachedError
from .services.logo_generator import LogoGenerator, save_image
from .services.studio import LogoStudio, StudioState
from .services.usage_quota import JsonFileStorage, UsageQuotaTracker

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="logo-studio", description="Brainstorm logo concepts with AI.")
    parser.add_argument("--prompt", type=str, help="Describe your logo (defaults to a sample description)")
    parser.add_argument("--style", choices=config.LOGO_STYLES, help="Append a style to the description")
    parser.add_argument("--image", action="store_true", help="Also render the concept as a PNG")
    parser.add_argument("--out-dir", type=str, default=".", help="Directory for rendered PNGs")
    parser.add_argument("--api-key", type=str, help="API key (or set LOGO_STUDIO_API_KEY)")
    parser.add_argument("--usage-file", type=str, help="Override the daily usage file location")
    parser.add_argument("--remaining", action="store_true", help="Print remaining generations for today and exit")
    parser.add_argument("--reset-usage", action="store_true", help="Clear today's usage counter and exit")
    parser.add_argument("--log-level", type=str, help="Logging level (defaults to LOG_LEVEL or INFO)")
    return parser


def _read_api_key(explicit: Optional[str]) -> str:
    key = explicit or config.CLIENT_API_KEY
    if key:
        return key
    if not sys.stdin.isatty():
        return ""
    return getpass.getpass("Enter your API key: ")


def _report_failure(studio: LogoStudio, exc: Optional[Exception] = None) -> int:
    reason = studio.error if studio.state is StudioState.ERROR else "An unknown error occurred."
    if exc is not None:
        logger.debug("Generation aborted", exc_info=exc)
        reason = f"{reason} ({exc})"
    print(f"Oops! Something went wrong. {reason}", file=sys.stderr)
    print(f"Daily generations remaining: {studio.remaining}", file=sys.stderr)
    return 1


def cli_main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    storage = JsonFileStorage(args.usage_file or config.USAGE_FILE)
    tracker = UsageQuotaTracker(storage, daily_limit=config.DAILY_LIMIT)

    if args.reset_usage:
        tracker.reset()
        print(f"Usage reset. Daily generations remaining: {tracker.remaining()}")
        return 0
    if args.remaining:
        print(f"Daily generations remaining: {tracker.remaining()}")
        return 0

    studio = LogoStudio(tracker, generator_factory=LogoGenerator, prompt=args.prompt or config.DEFAULT_PROMPT)
    if not studio.submit_key(_read_api_key(args.api_key)):
        print("API Key is missing. Pass --api-key or set LOGO_STUDIO_API_KEY.", file=sys.stderr)
        return 1
    if args.style:
        studio.add_style(args.style)

    if not studio.can_generate:
        print(f"Oops! Something went wrong. {DailyLimitReachedError(tracker.daily_limit)}", file=sys.stderr)
        return 1

    print("Brainstorming your concept...", file=sys.stderr)
    try:
        concept = studio.generate_concept()
    except Exception as exc:
        return _report_failure(studio, exc)
    if studio.state is StudioState.ERROR:
        return _report_failure(studio)

    print("Your Logo Concept:\n")
    print(concept)

    if args.image:
        print("\nRendering your logo...", file=sys.stderr)
        try:
            image_b64 = studio.generate_image()
            if studio.state is StudioState.ERROR:
                return _report_failure(studio)
            path = save_image(image_b64, args.out_dir)
        except Exception as exc:
            return _report_failure(studio, exc)
        print(f"\nSaved logo to: {path}")

    print(f"\nDaily generations remaining: {studio.remaining}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(cli_main())
