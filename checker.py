#!/usr/bin/env python3
"""
Multi-Resource Safety Checker
Main entry point for checking a resource-allocation state.

Loads owners and the free pool from a scenario file (or the built-in
demo), runs the safety search and reports the verdict.
"""

import argparse
import sys
from typing import Optional

from algorithms.safety import SafetyChecker, SafetyResult, VerdictSemantics
from models.configuration import Configuration
from models.errors import ContractViolation
from models.owner import Owner
from utils.logger import CheckerLogger
from utils.scenario_loader import ScenarioLoadError, get_scenario_description, load_scenario


EXIT_SAFE = 0
EXIT_UNSAFE = 1
EXIT_INVALID = 2


def demo_configuration() -> Configuration:
    """Classic two-owner, three-resource sample state."""
    a = Owner(owned=[0, 0, 0], required=[5, 7, 9], owner_id=0)
    b = Owner(owned=[0, 2, 0], required=[1, 3, 4], owner_id=1)
    return Configuration([a, b], [5, 2, 3])


def run_check(
    configuration: Configuration,
    semantics: VerdictSemantics,
    logger: CheckerLogger,
    show_trace: bool = False
) -> SafetyResult:
    """
    Run the safety check and report the result.

    Args:
        configuration: Initial configuration
        semantics: Verdict semantics
        logger: Logger instance
        show_trace: Print the search trace after the verdict

    Returns:
        SafetyResult of the check
    """
    logger.log(configuration.display("INITIAL CONFIGURATION"))
    logger.log(f"Semantics: {semantics.value}")

    checker = SafetyChecker(semantics=semantics, logger=logger, record_trace=show_trace)
    result = checker.check(configuration)

    if show_trace and result.trace is not None:
        logger.log(f"\n{'-'*60}")
        logger.log("SEARCH TRACE")
        logger.log(f"{'-'*60}")
        logger.log(result.trace.display())

    return result


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the checker."""
    parser = argparse.ArgumentParser(
        description='Multi-Resource Safety Checker'
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        '--scenario',
        type=str,
        help='Path to scenario JSON file'
    )
    source.add_argument(
        '--demo',
        action='store_true',
        help='Check the built-in two-owner sample state'
    )
    parser.add_argument(
        '--semantics',
        choices=[s.value for s in VerdictSemantics],
        default=VerdictSemantics.EXHAUSTIVE.value,
        help='Verdict semantics (default: exhaustive)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write the log to this file'
    )
    parser.add_argument(
        '--trace',
        action='store_true',
        help='Print the search trace'
    )

    args = parser.parse_args(argv)

    logger = CheckerLogger(verbose=args.verbose, log_file=args.log_file)
    try:
        if args.demo:
            configuration = demo_configuration()
        else:
            description = get_scenario_description(args.scenario)
            if description:
                logger.log(f"Scenario: {description}")
            configuration = load_scenario(args.scenario)

        result = run_check(configuration, VerdictSemantics(args.semantics), logger, args.trace)
    except (ScenarioLoadError, ContractViolation) as e:
        logger.log(f"Failed to load scenario: {e}", "error")
        return EXIT_INVALID
    finally:
        logger.close()

    return EXIT_SAFE if result.safe else EXIT_UNSAFE


if __name__ == '__main__':
    sys.exit(main())
