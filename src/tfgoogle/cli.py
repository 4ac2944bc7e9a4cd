"""
tfgoogle - CLI Entry Point.

Commands:
    examples list                         - List example configurations
    examples render NAME [--var K=V]...   - Render an example (doc values by default)
    data-source list                      - List data sources
    data-source read NAME [--arg K=V]...  - Read a data source and print its state as JSON
    docs generate --output-dir DIR        - Write data source documentation
"""

import argparse
import json
import os
import sys
from typing import Optional

from tfgoogle import logger as log
from tfgoogle.acctest.harness import random_suffix
from tfgoogle.core.config_loader import load_provider_config
from tfgoogle.core.exceptions import ProviderError
from tfgoogle.docs import write_docs
from tfgoogle.examples import get_example, list_examples
from tfgoogle.provider import GoogleProvider


def _parse_pairs(pairs: Optional[list[str]], option: str) -> dict:
    result = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"{option} expects KEY=VALUE, got '{pair}'")
        result[key] = value
    return result


def _cmd_examples_list(args) -> int:
    for name in list_examples():
        print(name)
    return 0


def _cmd_examples_render(args) -> int:
    example = get_example(args.name)
    if args.test:
        context = example.test_context(random_suffix(), os.environ)
    else:
        context = example.doc_context()
    context.update(_parse_pairs(args.var, "--var"))
    sys.stdout.write(example.render(context))
    return 0


def _cmd_data_source_list(args) -> int:
    for name in GoogleProvider().data_sources():
        print(name)
    return 0


def _cmd_data_source_read(args) -> int:
    config = load_provider_config(args.config, project=args.project)
    provider = GoogleProvider(config)

    state, diags = provider.read_data_source(args.name, _parse_pairs(args.arg, "--arg"))
    if diags.has_error():
        for diag in diags.errors():
            log.logger.error(diag.summary)
        return 1

    print(json.dumps(state, indent=2))
    return 0


def _cmd_docs_generate(args) -> int:
    written = write_docs(args.output_dir)
    log.logger.info(f"Generated {len(written)} documentation page(s)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tfgoogle", description="Google Cloud Terraform data sources and examples")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    examples = commands.add_parser("examples", help="Example configurations")
    examples_commands = examples.add_subparsers(dest="examples_command", required=True)

    examples_list = examples_commands.add_parser("list", help="List examples")
    examples_list.set_defaults(func=_cmd_examples_list)

    examples_render = examples_commands.add_parser("render", help="Render an example")
    examples_render.add_argument("name")
    examples_render.add_argument("--var", action="append", help="Template variable KEY=VALUE (repeatable)")
    examples_render.add_argument("--test", action="store_true", help="Use acceptance test values")
    examples_render.set_defaults(func=_cmd_examples_render)

    data_source = commands.add_parser("data-source", help="Data sources")
    data_source_commands = data_source.add_subparsers(dest="data_source_command", required=True)

    data_source_list = data_source_commands.add_parser("list", help="List data sources")
    data_source_list.set_defaults(func=_cmd_data_source_list)

    data_source_read = data_source_commands.add_parser("read", help="Read a data source")
    data_source_read.add_argument("name")
    data_source_read.add_argument("--arg", action="append", help="Data source argument KEY=VALUE (repeatable)")
    data_source_read.add_argument("--config", help="Path to config_credentials.json")
    data_source_read.add_argument("--project", help="Provider default project")
    data_source_read.set_defaults(func=_cmd_data_source_read)

    docs = commands.add_parser("docs", help="Documentation")
    docs_commands = docs.add_subparsers(dest="docs_command", required=True)

    docs_generate = docs_commands.add_parser("generate", help="Generate data source docs")
    docs_generate.add_argument("--output-dir", required=True)
    docs_generate.set_defaults(func=_cmd_docs_generate)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        log.setup_logger(debug_mode=True)
    else:
        log.configure_logger_from_env()

    try:
        return args.func(args)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except ProviderError as e:
        log.logger.error(str(e))
        log.print_stack_trace()
        return 1


if __name__ == "__main__":
    sys.exit(main())
