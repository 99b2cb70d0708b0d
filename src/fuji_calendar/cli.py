"""Command-line interface for the Fuji calendar."""

import argparse
import asyncio
import json
import logging
import sys

from fuji_calendar.calendar.aggregator import (
    AstronomicalEventsAggregator,
    CalendarViewState,
    normalize_date,
)
from fuji_calendar.client.api_client import CalendarApiClient
from fuji_calendar.config import get_settings
from fuji_calendar.models.event import FujiEvent


def _format_event(event: FujiEvent, tz) -> str:
    local_time = event.time.astimezone(tz).strftime("%H:%M")
    return (
        f"  {local_time}  {event.type.value:<7} {event.sub_type.value:<7} "
        f"{event.location.display_name()}  az {event.azimuth:.1f}"
    )


def _print_month(state: CalendarViewState, tz) -> None:
    data = state.calendar_data
    if data is None or not data.events:
        print("No events.")
        return

    for day in data.events:
        print(f"{day.calendar_date.isoformat()} [{day.type.value}] {len(day.events)} events")
        for event in day.events:
            print(_format_event(event, tz))


def _print_day(state: CalendarViewState, tz) -> None:
    if not state.day_events:
        print("No events.")
    for event in state.day_events:
        print(_format_event(event, tz))

    if state.weather is not None:
        weather = state.weather
        print(
            f"Weather: {weather.condition}, cloud {weather.cloud_cover:.0f}%, "
            f"visibility {weather.visibility:.0f}km ({weather.recommendation.value})"
        )


async def _run_month(args: argparse.Namespace) -> int:
    settings = get_settings()
    async with CalendarApiClient(args.api_url) as client:
        aggregator = AstronomicalEventsAggregator(client, args.year, args.month)
        await aggregator.start()
    state = aggregator.state

    if state.error:
        print(state.error, file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(state.calendar_data.to_json_dict(), ensure_ascii=False, indent=2))
    else:
        _print_month(state, settings.tzinfo)
    return 0


async def _run_day(args: argparse.Namespace) -> int:
    settings = get_settings()
    try:
        target = normalize_date(args.date, settings.tzinfo)
    except ValueError:
        print(f"Invalid date: {args.date}", file=sys.stderr)
        return 2

    async with CalendarApiClient(args.api_url) as client:
        aggregator = AstronomicalEventsAggregator(
            client, target.year, target.month, selected_date=target
        )
        await aggregator.start()
    state = aggregator.state

    if state.error:
        print(state.error, file=sys.stderr)
        return 1

    if args.json:
        payload = {
            "date": target.isoformat(),
            "events": [event.to_json_dict() for event in state.day_events],
            "weather": state.weather.to_json_dict() if state.weather else None,
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        _print_day(state, settings.tzinfo)
    return 0


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "fuji_calendar.api.app:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="fuji-calendar",
        description="Fuji Calendar - Diamond Fuji and Pearl Fuji events",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {settings.app_version}",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help=f"Calendar API base URL (default: {settings.api_base_url})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Month command
    month_parser = subparsers.add_parser("month", help="Show a month's events")
    month_parser.add_argument("year", type=int, help="Year, e.g. 2025")
    month_parser.add_argument(
        "month",
        type=int,
        choices=range(1, 13),
        metavar="MONTH",
        help="Month (1-12)",
    )
    month_parser.add_argument("--json", action="store_true", help="Print raw JSON")

    # Day command
    day_parser = subparsers.add_parser("day", help="Show a day's events and weather")
    day_parser.add_argument("date", help="Date (YYYY-MM-DD)")
    day_parser.add_argument("--json", action="store_true", help="Print raw JSON")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API server")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "month":
        return asyncio.run(_run_month(args))
    if args.command == "day":
        return asyncio.run(_run_day(args))
    return _run_serve(args)


if __name__ == "__main__":
    sys.exit(main())
