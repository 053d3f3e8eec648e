"""
CharmVault command line verifier.

    charmvault-verify spell.json [--config validator.json] [--strict]
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import List, Optional

from charmvault import __version__
from charmvault.config import ValidatorConfig, setup_logging
from charmvault.constants import (
    DISTRIBUTION_MODE_STRICT,
    EXIT_ACCEPT,
    EXIT_REJECT,
    EXIT_BAD_INPUT,
)
from charmvault.errors import CharmVaultError
from charmvault.spell import load_spell, verify_spell

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="charmvault-verify",
        description="Validate a spell against the CharmVault inheritance contract",
    )
    parser.add_argument("spell", type=str, help="Path to spell JSON document")
    parser.add_argument("--config", "-c", type=str, help="Path to validator config file")
    parser.add_argument("--log-level", type=str, help="Log level (overrides config)")
    parser.add_argument("--strict", action="store_true",
                        help="Verify deadline and payouts on distribution")
    parser.add_argument("--all-diagnostics", action="store_true",
                        help="Evaluate every operation and report all rejection reasons")
    parser.add_argument("--json", action="store_true", help="Print verdicts as JSON")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = _build_parser().parse_args(argv)

    try:
        config = ValidatorConfig.load(args.config) if args.config else ValidatorConfig.default()
    except (OSError, json.JSONDecodeError, CharmVaultError) as e:
        print(f"error: cannot load config: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    if args.log_level:
        config.log.level = args.log_level
    if args.strict:
        config.policy.distribution_mode = DISTRIBUTION_MODE_STRICT
    if args.all_diagnostics:
        config.policy.collect_all_diagnostics = True

    problems = config.validate()
    if problems:
        print(f"error: invalid configuration: {'; '.join(problems)}", file=sys.stderr)
        return EXIT_BAD_INPUT

    setup_logging(config.log)

    try:
        spell = load_spell(args.spell)
    except (OSError, CharmVaultError) as e:
        print(f"error: cannot load spell: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    verdicts = verify_spell(spell, config)

    if args.json:
        print(json.dumps({key: v.to_dict() for key, v in verdicts.items()}, indent=2))
    else:
        for key, verdict in verdicts.items():
            print(f"{key}: {verdict.summary()}")

    return EXIT_ACCEPT if all(v.accepted for v in verdicts.values()) else EXIT_REJECT


if __name__ == "__main__":
    sys.exit(main())
