"""
Command Line Interface for laravel-suppress
"""

import argparse
import sys
import logging
from pathlib import Path
from typing import List, Optional

from . import __version__
from .evaluator import evaluate_file
from .exceptions import ClassDescriptionError, RuleConfigurationError
from .handler import SuppressHandler
from .models import RULE_TABLES, SuppressionRuleSet
from .reporters import get_reporter
from .rule_loader import RuleLoader


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging"""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog='laravel-suppress',
        description='laravel-suppress - Show which analyzer issues are suppressed for Laravel conventions',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s classes.yaml                        # Evaluate with bundled rules
  %(prog)s classes.json -f json -o out.json    # JSON output
  %(prog)s classes.yaml --root-namespace Acme  # Application namespace is Acme
  %(prog)s --list-rules -r my_rules.yaml       # Show a custom rule file
        """
    )

    parser.add_argument(
        'classes',
        nargs='?',
        help='YAML or JSON file of class descriptions to evaluate'
    )

    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument(
        '-o', '--output',
        help='Output file path (default: stdout)'
    )
    output_group.add_argument(
        '-f', '--format',
        choices=['console', 'json'],
        default='console',
        help='Output format (default: console)'
    )
    output_group.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output'
    )

    rule_group = parser.add_argument_group('Rule Options')
    rule_group.add_argument(
        '-r', '--rules-file',
        help='Custom suppression rules file (default: bundled Laravel rules)'
    )
    rule_group.add_argument(
        '--root-namespace',
        help="Application root namespace, when it is not 'App'"
    )
    rule_group.add_argument(
        '--list-rules',
        action='store_true',
        help='List all active rules and exit'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Debug mode (very verbose)'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser.parse_args(args)


def list_rules(rules: SuppressionRuleSet) -> None:
    """Print every rule grouped by table"""
    print(f"\nActive Rules ({rules.rule_count} total):\n")
    print("-" * 80)
    print(f"Source: {rules.source or 'built-in'}")
    print(f"Root namespace: {rules.root_namespace or '-'}")
    print(f"Namespace separator: {rules.namespace_separator}")

    entries = list(rules.iter_rules())
    for table in RULE_TABLES:
        table_entries = [e for e in entries if e.table == table]
        if not table_entries:
            continue
        print(f"\n[{table}]")
        for entry in table_entries:
            print(f"  {entry}")

    print("\n" + "-" * 80)


def run_evaluation(args: argparse.Namespace, rules: SuppressionRuleSet) -> int:
    """Apply the rules to the class descriptions file and report"""
    handler = SuppressHandler(rules)
    result = evaluate_file(handler, args.classes)

    reporter_kwargs = {}
    if args.format == 'console':
        reporter_kwargs['use_colors'] = not args.no_color
        reporter_kwargs['verbose'] = args.verbose

    reporter = get_reporter(args.format, **reporter_kwargs)
    reporter.report(result, args.output)

    return 1 if result.errors else 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parsed_args = parse_args(args)

    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        rules = RuleLoader(parsed_args.rules_file, parsed_args.root_namespace).load()

        if parsed_args.list_rules:
            list_rules(rules)
            return 0

        if not parsed_args.classes:
            print("Error: a class descriptions file is required", file=sys.stderr)
            return 1

        target = Path(parsed_args.classes)
        if not target.exists():
            print(f"Error: Class descriptions file does not exist: {target}", file=sys.stderr)
            return 1

        return run_evaluation(parsed_args, rules)
    except RuleConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except ClassDescriptionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        if parsed_args.debug:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
