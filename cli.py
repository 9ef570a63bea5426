#!/usr/bin/env python3
"""
Command-line interface for the ticket inventory service.

Usage:
    uv run python cli.py [command] [options]

Commands:
    demo        Run demo scenarios
    events      List events and remaining tickets
    test        Run the test suite
    serve       Start the API server

Examples:
    uv run python cli.py demo booking
    uv run python cli.py demo last-seat
    uv run python cli.py demo all
    uv run python cli.py events
    uv run python cli.py serve --reload
"""

import argparse
import subprocess
import sys


def run_demo(scenario: str) -> None:
    """Run a demo scenario."""
    if scenario == "booking":
        from ticketing.demo import run_booking_demo
        run_booking_demo()
    elif scenario == "last-seat":
        from ticketing.demo import run_last_seat_demo
        run_last_seat_demo()
    elif scenario == "dashboard":
        from ticketing.demo import run_dashboard_demo
        run_dashboard_demo()
    elif scenario == "all":
        from ticketing.demo import (
            run_booking_demo,
            run_last_seat_demo,
            run_dashboard_demo,
        )
        run_booking_demo()
        run_last_seat_demo()
        run_dashboard_demo()
    else:
        print(f"Unknown scenario: {scenario}")
        sys.exit(1)


def list_events() -> None:
    """Print the seeded events with their remaining tickets."""
    from ticketing.query_service import QueryService

    for event in QueryService().list_events():
        status = "SOLD OUT" if event.is_sold_out else f"{event.remaining_tickets} left"
        print(f"{event.id}  {event.title:<32} {event.date:%Y-%m-%d}  {status}")


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    cmd = ["uv", "run", "pytest"] + args
    subprocess.run(cmd)


def run_server(host: str, port: int, reload: bool) -> None:
    """Start the API server."""
    cmd = ["uv", "run", "uvicorn", "api.main:app", f"--host={host}", f"--port={port}"]
    if reload:
        cmd.append("--reload")

    print(f"Starting server at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    subprocess.run(cmd)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Ticket Inventory Service CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo booking
  %(prog)s demo last-seat
  %(prog)s demo all
  %(prog)s events
  %(prog)s test -v
  %(prog)s serve --reload
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demo scenarios")
    demo_parser.add_argument(
        "scenario",
        choices=["booking", "last-seat", "dashboard", "all"],
        help="Which scenario to run",
    )

    # Events command
    subparsers.add_parser("events", help="List events and remaining tickets")

    # Test command
    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    if args.command == "demo":
        run_demo(args.scenario)
    elif args.command == "events":
        list_events()
    elif args.command == "test":
        run_tests(args.pytest_args)
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
