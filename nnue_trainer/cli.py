"""
cli.py: Inspect the training feature layout of a configured feature set.

Usage:
    nnue-layout [--config FILE] [--override KEY=VALUE ...]
                [--message NAME=VALUE ...] [--index N ...]
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from nnue_trainer.config_schema import LoggingConfig
from nnue_trainer.errors import FactorizationError
from nnue_trainer.features import BaseFeatureSetFactorizer, build_factorizer
from nnue_trainer.utils import Message, apply_message, load_config, parse_override

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] [%(name)s] %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show how compact NNUE input features expand into training features."
    )
    parser.add_argument("--config", type=str, default=None, help="Path to a YAML config file.")
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a config value, e.g. features.p_factor=false. Repeatable.",
    )
    parser.add_argument(
        "--message",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Send a hyperparameter message, e.g. features.feature_set=K,P. Repeatable.",
    )
    parser.add_argument(
        "--index",
        type=int,
        action="append",
        default=[],
        help="Compact index whose training features to print. Repeatable.",
    )
    return parser.parse_args(argv)


def setup_logging(config: LoggingConfig) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))
    logging.basicConfig(
        level=config.log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )


def print_layout(factorizer: BaseFeatureSetFactorizer, out: Optional[TextIO] = None) -> None:
    out = out or sys.stdout
    print(
        f"Feature set {'+'.join(factorizer.feature_names)}: "
        f"{factorizer.base_dimensions} input -> {factorizer.get_dimensions()} training dimensions",
        file=out,
    )
    for segment in factorizer.layout():
        print(
            f"  {segment.name:<8} input [{segment.compact_start}, {segment.compact_end})"
            f"  factors [{segment.factor_start}, {segment.factor_end})",
            file=out,
        )


def print_training_features(
    factorizer: BaseFeatureSetFactorizer, base_index: int, out: Optional[TextIO] = None
) -> None:
    out = out or sys.stdout
    features = factorizer.get_training_features(base_index)
    rendered = ", ".join(f"{f.index} x{f.count}" for f in features)
    print(f"{base_index} -> {rendered}", file=out)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        overrides = {}
        for text in args.override:
            overrides.update(parse_override(text))
        config = load_config(args.config, cli_overrides=overrides)

        for text in args.message:
            name, _, value = text.partition("=")
            if not apply_message(config, Message(name, value)):
                print(f"Warning: message {name!r} was not accepted", file=sys.stderr)
    except (OSError, ValueError) as e:
        print(f"Error: failed to load configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging)

    try:
        factorizer = build_factorizer(config.features)
        print_layout(factorizer)
        for base_index in args.index:
            print_training_features(factorizer, base_index)
    except FactorizationError as e:
        logger.error("Factorization failed: %s", e)
        return 1
    except ValueError as e:
        logger.error("Invalid feature set: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
