import argparse
import logging
import sys
from functools import partial

from solprobe import __version__
from solprobe import logger as log_setup
from solprobe.config import ConfigError, load_config
from solprobe.diagnostics import run_diagnostics
from solprobe.render import ConsoleRenderer
from solprobe.scheduler import RefreshScheduler
from solprobe.services.rpc import RpcClient
from solprobe.state import ApplicationState, Tab
from solprobe.views import project

logger = logging.getLogger("solprobe")

MODES = {
    "node-health": Tab.NODE_HEALTH,
    "network-performance": Tab.NETWORK_PERFORMANCE,
    "troubleshoot": Tab.TROUBLESHOOT,
    "monitor": Tab.MONITOR,
}


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a whole number: {raw!r}")
    if value < 1:
        raise argparse.ArgumentTypeError("must be at least 1 second")
    return value


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--url", help="RPC endpoint (default: default_url from the config file)")
    common.add_argument(
        "--interval",
        type=_positive_int,
        help="seconds between refreshes (default: update_interval from the config file)",
    )
    common.add_argument("--config", help="path to config.toml")
    common.add_argument(
        "--report",
        action="store_true",
        help="evaluate once, print the view and exit instead of starting the dashboard",
    )

    parser = argparse.ArgumentParser(
        prog="solprobe", description="Live health dashboard for a Solana RPC node."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True, metavar="command")
    for name, tab in MODES.items():
        commands.add_parser(name, parents=[common], help=f"open on the {tab.title} view")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    log_setup.init()
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"solprobe: {exc}", file=sys.stderr)
        return 2

    logger.info("SolProbe started")
    url = args.url or config.default_url
    interval = args.interval or config.update_interval
    client = RpcClient(url)
    scheduler = RefreshScheduler(partial(run_diagnostics, client), interval)
    state = ApplicationState(selected_tab=MODES[args.command])

    if args.report:
        scheduler.refresh_now(state)
        ConsoleRenderer().draw(project(state))
        return 0

    try:
        from solprobe.app import SolProbeApp
    except ModuleNotFoundError as e:
        if "textual" in str(e):
            print("Missing dependency. Install with: pip install -e .", file=sys.stderr)
            return 1
        raise
    SolProbeApp(scheduler, state, url=url).run()
    logger.info("SolProbe stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
