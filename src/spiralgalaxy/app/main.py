"""
Run with: python -m spiralgalaxy
"""
from __future__ import annotations

import argparse
import logging
import sys

from spiralgalaxy.app.application import create_app
from spiralgalaxy.app.state import Store
from spiralgalaxy.app.ui.main_window import MainWindow
from spiralgalaxy.controller.regeneration import GalaxyContext
from spiralgalaxy.logging_config import setup_logging
from spiralgalaxy.model.generator import PointFieldGenerator
from spiralgalaxy.model.parameters import DEFAULT_PARAMETERS, GalaxyParameters
from spiralgalaxy.model.random_source import NumpyRandomSource

# (option, type, help) for every galaxy parameter settable from the command line
PARAMETER_OPTIONS = (
    ("count", int, "number of points"),
    ("size", float, "point sprite size in world units"),
    ("radius", float, "galaxy radius"),
    ("branches", int, "number of spiral arms"),
    ("spin", float, "arm twist per unit of radius"),
    ("randomness", float, "jitter amount"),
    ("randomness_power", float, "jitter exponent, larger keeps points closer to the arms"),
    ("inside_color", str, "center color as #rrggbb"),
    ("outside_color", str, "rim color as #rrggbb"),
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive procedural spiral galaxy.")
    for name, kind, text in PARAMETER_OPTIONS:
        parser.add_argument(f"--{name.replace('_', '-')}", dest=name, type=kind, default=None, help=text)
    parser.add_argument("--seed", type=int, default=None, help="seed for a reproducible galaxy")
    parser.add_argument(
        "--unscaled-jitter",
        action="store_true",
        help="do not multiply positional jitter by the randomness parameter",
    )
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    return parser.parse_args(argv)


def parameters_from_args(args: argparse.Namespace) -> GalaxyParameters:
    """
    Defaults overridden by the parameter options given on the command line.

    Raises:
        ValueError: A color is malformed or the parameters are rejected.
    """
    data = DEFAULT_PARAMETERS.to_dict()
    for name, _, _ in PARAMETER_OPTIONS:
        value = getattr(args, name)
        if value is not None:
            data[name] = value
    return GalaxyParameters.from_dict(data).validate()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    try:
        parameters = parameters_from_args(args)
    except ValueError as e:
        logging.getLogger(__name__).error(f"Invalid galaxy parameters: {e}")
        return 2

    context = GalaxyContext(
        parameters=parameters,
        rng=NumpyRandomSource(args.seed),
        generator=PointFieldGenerator(scale_jitter=not args.unscaled_jitter),
    )

    app = create_app(sys.argv[:1])
    win = MainWindow(Store(context))
    win.show()
    win.generate_initial()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
