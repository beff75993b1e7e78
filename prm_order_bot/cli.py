"""
Command line entry point.

Asks for the run parameters one prompt at a time (Enter keeps the default)
and drives a browser that is already listening on the debugging port.

    prm-order-bot                    # connect to a running browser
    prm-order-bot --launch-browser   # start BROWSER_PATH with a debugging port first
    prm-order-bot --history          # print the success log summary
"""

import argparse
import sys
from typing import Callable, Optional

from . import config
from .data_handler import SuccessLog
from .main import AutomationApp, CONNECT, LAUNCH
from .run_params import RunParams, default_params, normalize_params


def prompt_params(ask: Callable[[str], str] = input) -> RunParams:
    """Prompt for every run parameter; blank or invalid answers become defaults"""
    defaults = default_params()
    payer_choices = ", ".join(f"{code}={label}" for code, label in config.PAYER_RELATIONS.items())

    month = ask(f"เดือน DCR (1-12) [{defaults.dcr_month}]: ")
    year = ask(f"ปี DCR (พ.ศ.) [{defaults.dcr_year}]: ")
    tel = ask(f"เบอร์โทรศัพท์ [{defaults.tel}]: ")
    run_times = ask(f"จำนวนรอบ [{defaults.run_times}]: ")
    payer = ask(f"ความสัมพันธ์ผู้ชำระ ({payer_choices}) [{defaults.payer_relation}]: ")

    return normalize_params(month, year, tel, run_times, payer)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create PRM orders and SSS applications with synthetic customers.")
    parser.add_argument("--launch-browser", action="store_true",
                        help="Start BROWSER_PATH with --remote-debugging-port before connecting.")
    parser.add_argument("--new-browser", action="store_true",
                        help="Launch a persistent-profile browser instead of connecting over CDP.")
    parser.add_argument("--cdp-port", type=int, default=config.CDP_PORT,
                        help=f"Remote debugging port (default: {config.CDP_PORT}).")
    parser.add_argument("--history", action="store_true",
                        help="Print the success log summary and exit.")
    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.history:
        SuccessLog(config.SUCCESS_LOG_FILE).display_summary()
        return 0

    params = prompt_params()
    app = AutomationApp(
        params,
        browser_mode=LAUNCH if args.new_browser else CONNECT,
        launch_browser=args.launch_browser,
    )
    app.session.cdp_port = args.cdp_port
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
