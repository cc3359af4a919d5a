"""Terminal dashboard for the oracle node monitor.

    om-dashboard watch
    om-dashboard node addr1q... --from 2024-01-01 --to 2024-01-31

API location and key come from --api-url/--api-key or OM_API_URL/OM_API_KEY.
"""

import argparse
import os
import sys
import time
from collections.abc import Sequence
from datetime import date, timedelta

from src.om_common.datetime_utils import parse_iso8601, utc_now
from src.om_common.logging_config import configure_logging
from src.om_dashboard.client import DashboardAuthError, DashboardError, MonitorApiClient
from src.om_dashboard.poller import Poller
from src.om_dashboard.render import (
    render_balance,
    render_nodes,
    render_reward,
    render_transactions,
)

NODES_INTERVAL_SECONDS = 30.0
REWARD_BALANCE_INTERVAL_SECONDS = 30.0
PRICE_INTERVAL_SECONDS = 60.0
DEFAULT_WINDOW_DAYS = 30

_CLEAR_SCREEN = "\033[2J\033[H"


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="om-dashboard", description="Oracle node monitor dashboard")
    p.add_argument("--api-url", default=os.environ.get("OM_API_URL", "http://localhost:4000/api"))
    p.add_argument("--api-key", default=os.environ.get("OM_API_KEY"), help="X-API-Key value")
    # Poll failures are already listed on screen; WARNING output would tear the redraw.
    p.add_argument("--log-level", default="ERROR", help="om.* logger level (stderr)")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("watch", help="Poll nodes and reward data and redraw on change")

    node = sub.add_parser("node", help="Show balance and transactions for one address")
    node.add_argument("address")
    node.add_argument(
        "--from", dest="from_date", help="ISO-8601 start (inclusive), default 30 days ago"
    )
    node.add_argument("--to", dest="to_date", help="ISO-8601 end (inclusive), default today")
    return p


def build_poller(client: MonitorApiClient) -> Poller:
    poller = Poller()
    poller.add("nodes", NODES_INTERVAL_SECONDS, client.get_nodes)
    poller.add("reward_balance", REWARD_BALANCE_INTERVAL_SECONDS, client.get_reward_balance)
    poller.add("price", PRICE_INTERVAL_SECONDS, client.get_token_price)
    return poller


def render_screen(poller: Poller) -> str:
    nodes = poller.get("nodes")
    balance = poller.get("reward_balance")
    price = poller.get("price")

    parts = []
    if nodes.data is not None:
        parts.append(render_nodes(nodes.data))
    parts.append(render_reward(balance.data, price.data))
    errors = [f"! {job.name}: {job.error}" for job in poller.jobs if job.error]
    if errors:
        parts.append("\n".join(errors))
    return "\n\n".join(parts)


def watch(client: MonitorApiClient) -> int:
    poller = build_poller(client)
    try:
        while True:
            if poller.run_due():
                sys.stdout.write(_CLEAR_SCREEN + render_screen(poller) + "\n")
                sys.stdout.flush()
            time.sleep(max(poller.seconds_until_next(), 0.5))
    except KeyboardInterrupt:
        return 0


def default_window(today: date) -> tuple[str, str]:
    """Last DEFAULT_WINDOW_DAYS days through today, as date-only strings."""
    return (today - timedelta(days=DEFAULT_WINDOW_DAYS)).isoformat(), today.isoformat()


def show_node(
    client: MonitorApiClient, address: str, from_date: str | None, to_date: str | None
) -> int:
    default_from, default_to = default_window(utc_now().date())
    start = parse_iso8601(from_date or default_from)
    end = parse_iso8601(to_date or default_to, end_of_day=True)

    balance = client.get_node_balance(address)
    transactions = client.get_node_transactions(address, start, end)
    print(render_balance(balance))
    print()
    print(render_transactions(transactions))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_level)
    if not args.api_key:
        print("An API key is required (--api-key or OM_API_KEY).", file=sys.stderr)
        return 2

    with MonitorApiClient(args.api_url, args.api_key) as client:
        try:
            if args.command == "watch":
                return watch(client)
            return show_node(client, args.address, args.from_date, args.to_date)
        except DashboardAuthError as exc:
            print(f"Authentication failed: {exc}", file=sys.stderr)
            return 1
        except (DashboardError, ValueError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
