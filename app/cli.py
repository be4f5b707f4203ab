"""CLI entrypoint for the graph schema introspector."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from core.config import Config, IntrospectionOptions
from core.errors import IntrospectionError
from core.schema import SchemaLoader
from core.validation import SchemaValidator
from pipeline.document import render
from pipeline.introspector import SchemaIntrospector
from storage.exporters.file_exporter import write_schema_file
from storage.neo4j.neo4j_utils import Neo4jConnection
from storage.neo4j.schema_source import Neo4jSchemaSource

logger = logging.getLogger(__name__)


def _ensure_utf8_console() -> None:
    os.environ.setdefault("PYTHONIOENCODING", "utf-8")
    try:
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8", errors="replace")
    except (ValueError, OSError):
        pass


def setup_logging(config: Config) -> None:
    cfg = config.logging
    level_name = str(cfg.get('level', 'INFO')).upper()
    fmt = cfg.get('console_format', '%(levelname)s: %(message)s')

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG)

    # stdout carries the document, logs go to stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, level_name, logging.INFO))
    console_handler.setFormatter(logging.Formatter(fmt))
    root_logger.addHandler(console_handler)

    output_dir = cfg.get('output_dir')
    if output_dir:
        log_dir = Path(output_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_fmt = cfg.get('file_format', '%(asctime)s - %(levelname)s - %(name)s - %(message)s')
        file_handler = logging.FileHandler(log_dir / 'introspector.log', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(file_fmt))
        root_logger.addHandler(file_handler)

    logging.getLogger('neo4j').setLevel(logging.WARNING)


def resolve_options(config: Config, args: argparse.Namespace) -> IntrospectionOptions:
    params = config.introspection_options().to_params()
    if args.random_ids:
        params['useConstantIds'] = False
    if args.pretty:
        params['prettyPrint'] = True
    if args.no_quote_tokens:
        params['quoteTokens'] = False
    return IntrospectionOptions.from_params(params)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Introspect a Neo4j database into a graph schema representation')
    parser.add_argument('--config', default='config/default.yaml', help='Config path')
    parser.add_argument('--output', '-o', help='Output file, stdout when omitted')
    parser.add_argument('--random-ids', action='store_true', help='Use time sorted random ids instead of constant ids')
    parser.add_argument('--pretty', action='store_true', help='Pretty print the JSON document')
    parser.add_argument('--no-quote-tokens', action='store_true', help='Emit label and type names unquoted')
    parser.add_argument('--validate', action='store_true', help='Validate the document against the bundled JSON schema')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    _ensure_utf8_console()
    args = build_parser().parse_args(argv)

    try:
        config = Config(args.config)
        setup_logging(config)
        options = resolve_options(config, args)
        with Neo4jConnection.from_config(config) as conn:
            introspector = SchemaIntrospector(Neo4jSchemaSource(conn))
            document = introspector.build(options)
    except (IntrospectionError, FileNotFoundError) as exc:
        logger.error(f"Introspection failed: {exc}")
        return 2

    status = 0
    if args.validate:
        errors = SchemaValidator(SchemaLoader().schema).validate(document)
        if errors:
            logger.warning("Schema validation errors:\n" + "\n".join(errors[:20]))
            status = 1

    rendered = render(document, options.pretty_print)
    if args.output:
        write_schema_file(rendered, args.output)
    else:
        sys.stdout.write(rendered + "\n")
    return status


if __name__ == '__main__':
    sys.exit(main())
