"""Command-line entry point: ``chain-life auth`` and ``chain-life fetch``.

Credentials may come from flags or from ``STRAVA_*`` environment variables,
optionally loaded from a ``.env`` file. Results go to stdout; errors go to
stderr with a non-zero exit code.
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone

from dotenv import load_dotenv

from . import activity_types
from .auth import StravaAuth
from .config import AppConfig
from .core import ActivityFetcher
from .dates import parse_date
from .exceptions import InvalidDate, StravaDistanceError
from .models import TokenResponse
from .utils import configure_logging

logger = logging.getLogger(__name__)

PROG = "chain-life"


def build_parser(config: AppConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="A CLI tool to fetch kilometers from Strava since a given date",
    )
    sub = parser.add_subparsers(dest="command", metavar="<COMMAND>", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    common.add_argument(
        "--log-file",
        default=config.log_file,
        help="Also write a detailed log to this file (env: STRAVA_LOG_FILE)",
    )

    auth = sub.add_parser(
        "auth",
        parents=[common],
        help="Authenticate with Strava using OAuth",
        description="Authenticate with Strava using OAuth and print the resulting tokens",
    )
    auth.add_argument("--client-id", default=config.client_id, help="Strava client ID (env: STRAVA_CLIENT_ID)")
    auth.add_argument(
        "--client-secret",
        default=config.client_secret,
        help="Strava client secret (env: STRAVA_CLIENT_SECRET)",
    )

    fetch = sub.add_parser(
        "fetch",
        parents=[common],
        help="Fetch kilometers data from Strava",
        description="Fetch kilometers data from Strava since the given date",
    )
    fetch.add_argument("-d", "--date", required=True, help="Start date in YYYY-MM-DD format")
    fetch.add_argument(
        "-t",
        "--token",
        default=config.access_token,
        help="Strava access token (env: STRAVA_ACCESS_TOKEN)",
    )
    fetch.add_argument(
        "-a",
        "--activity-types",
        help="Comma-separated activity types to include: 'cycling', 'running', 'all' "
        "or Strava types such as Ride,Run,Walk (default: every activity)",
    )
    fetch.add_argument(
        "--per-page",
        type=int,
        default=config.per_page,
        help="Activities per request, max 200 (env: STRAVA_PER_PAGE)",
    )
    return parser


def _read_redirect(url: str) -> str:
    print("\n1) Open this URL in your browser and authorize the application:\n")
    print(url, "\n")
    print("2) Your browser will be redirected to a localhost page that fails to load. That is expected.")
    return input("3) Paste the FULL redirect URL here: ").strip()


def _print_token(token: TokenResponse) -> None:
    expires = datetime.fromtimestamp(token.expires_at, tz=timezone.utc)
    print("\nAuthentication successful!")
    print(f"  Athlete:       {token.athlete.display_name} (id={token.athlete.id})")
    if token.athlete.location:
        print(f"  Location:      {token.athlete.location}")
    print(f"  Token type:    {token.token_type}")
    print(f"  Access token:  {token.access_token}")
    print(f"  Refresh token: {token.refresh_token}")
    print(f"  Expires at:    {expires:%Y-%m-%d %H:%M:%S} UTC (in {token.expires_in} seconds)")
    if token.scope:
        print(f"  Scope:         {token.scope}")
    print(f"\nFetch your distance with:\n  {PROG} fetch --date YYYY-MM-DD --token {token.access_token}")


def run_auth(args: argparse.Namespace, config: AppConfig) -> int:
    auth = StravaAuth(
        args.client_id,
        args.client_secret,
        timeout=config.timeout,
        max_retries=config.max_retries,
    )
    try:
        token = auth.run(_read_redirect)
    except (EOFError, KeyboardInterrupt):
        print("\nAuthorization cancelled.", file=sys.stderr)
        return 1
    _print_token(token)
    return 0


def run_fetch(args: argparse.Namespace, config: AppConfig) -> int:
    try:
        start_date = parse_date(args.date)
    except InvalidDate as e:
        raise InvalidDate(f"Failed to parse the provided date: {e}") from e
    logger.info("Parsed start date: %s", start_date)

    allowed = None
    if args.activity_types is not None:
        allowed = activity_types.resolve(args.activity_types)
        logger.info("Filtering on activity types: %s", activity_types.describe(allowed))

    with ActivityFetcher(args.token, timeout=config.timeout, max_retries=config.max_retries) as fetcher:
        summary = fetcher.fetch_summary(start_date, allowed, per_page=args.per_page)

    print(f"Total kilometers since {args.date}: {summary.kilometers:.2f} km")
    if allowed is not None:
        print(f"Activities included: {summary.included_count}, excluded: {summary.excluded_count}")
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv(encoding="utf-8")

    try:
        config = AppConfig.from_env()
    except StravaDistanceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser = build_parser(config)
    args = parser.parse_args(argv)

    if args.command == "auth":
        missing = [flag for flag, value in (("--client-id", args.client_id), ("--client-secret", args.client_secret)) if not value]
        if missing:
            parser.error(f"the following arguments are required: {', '.join(missing)}")
    elif not args.token:
        parser.error("the following arguments are required: -t/--token")

    configure_logging(verbose=args.verbose, log_file=args.log_file)
    logger.debug("Starting %s %s", PROG, args.command)

    handler = run_auth if args.command == "auth" else run_fetch
    try:
        return handler(args, config)
    except StravaDistanceError as e:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
