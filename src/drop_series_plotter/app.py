from __future__ import annotations

import argparse
import sys

from drop_series_plotter.utils.log import configure_log_path, log_event


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drop-series-plotter",
        description="Drop delimited text files onto a page and plot them as series.",
    )
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8050)
    parser.add_argument("--debug", dest="debug", action="store_true", default=False)
    parser.add_argument("--no-debug", dest="debug", action="store_false")
    parser.add_argument("--log-file", default="", help="Diagnostics log (default: ~/DropSeriesPlotter_error.log)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    log_path = configure_log_path(args.log_file or None)
    log_event("app.start", "dash", host=args.host, port=args.port, debug=args.debug, log=log_path)

    from drop_series_plotter.ui.dash_app import main as dash_main

    dash_main(host=args.host, port=args.port, debug=args.debug, use_reloader=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
