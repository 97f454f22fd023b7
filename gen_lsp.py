#!/usr/bin/env python3
"""
gen_lsp

Generates lua-ls (LuaCATS) annotations for the Language Server Protocol from the
official metaModel.json, and optionally refreshes the method/capability tables at
the end of runtime/lua/vim/lsp/protocol.lua.

Usage:
    python gen_lsp.py gen [--version <version>] [--out <file>] [--methods] [--capabilities]
                          [--schema <metaModel.json>] [--protocol-file <file>] [--verbose]

Arguments:
    gen             : The only command. Without it this help is printed.
    --version       : LSP version folder the metaModel is fetched from (default: 3.18)
    --out           : Annotation file to (over)write
                      (default: runtime/lua/vim/lsp/_meta/protocol.lua)
    --methods       : Regenerate the vim.lsp.protocol.Method aliases and protocol.Methods
    --capabilities  : Regenerate protocol._request_name_to_capability
    --schema        : Read a local metaModel.json instead of downloading it
    --protocol-file : File patched by --methods/--capabilities
                      (default: runtime/lua/vim/lsp/protocol.lua)
    --verbose, -v   : Enable verbose output for debugging

Environment overrides:
    GEN_LSP_VERSION, GEN_LSP_OUT, GEN_LSP_SCHEMA, GEN_LSP_PROTOCOL_FILE, GEN_LSP_VERBOSE

Example:
    python gen_lsp.py gen
    python gen_lsp.py gen --version 3.18 --out runtime/lua/vim/lsp/_meta/protocol.lua
    python gen_lsp.py gen --version 3.18 --methods --capabilities
"""

import argparse
import os
import sys
from typing import Optional

from lsp_model import Protocol
from schema_loader import load_protocol, SchemaFetchError, SchemaFormatError
from generators.lua_annotations_generator import write_lua_annotations_file
from generators.method_table_generator import generate_protocol_block
from protocol_patcher import patch_protocol_file

DEFAULT_LSP_VERSION = '3.18'
DEFAULT_OUTPUT_FILE = 'runtime/lua/vim/lsp/_meta/protocol.lua'
DEFAULT_PROTOCOL_FILE = 'runtime/lua/vim/lsp/protocol.lua'
COMMANDS = ('gen',)


class LspAnnotationConverter:
    """
    Loads the metaModel once and writes the generated files from it.
    """

    def __init__(self, version: str = DEFAULT_LSP_VERSION, output_file: str = DEFAULT_OUTPUT_FILE,
                 protocol_file: str = DEFAULT_PROTOCOL_FILE, schema_path: Optional[str] = None,
                 verbose: bool = False):
        """
        Args:
            version: LSP version used to build the metaModel URL and the file banner
            output_file: Path of the generated annotation file
            protocol_file: Path of the hand-maintained file holding the method tables
            schema_path: Local metaModel.json; when set nothing is downloaded
            verbose: Whether to print debug information (default: False)
        """
        self.version = version
        self.output_file = output_file
        self.protocol_file = protocol_file
        self.schema_path = schema_path
        self.verbose = verbose
        self.protocol: Optional[Protocol] = None

    def load_schema(self) -> bool:
        try:
            self.protocol = load_protocol(self.version, self.schema_path, self.verbose)
        except SchemaFetchError as e:
            print(f"Error: {e}")
            if e.body:
                print(e.body, file=sys.stderr)
            return False
        except SchemaFormatError as e:
            print(f"Error: {e}")
            return False
        if self.verbose:
            p = self.protocol
            print(f"[DEBUG] load_schema: {len(p.requests)} requests, {len(p.notifications)} notifications, "
                  f"{len(p.structures)} structures, {len(p.enumerations)} enumerations, "
                  f"{len(p.type_aliases)} type aliases")
        return True

    def generate_annotations(self) -> bool:
        if not self.protocol:
            print("Error: No protocol available. Load the schema first.")
            return False
        try:
            write_lua_annotations_file(self.protocol, self.version, self.output_file, self.verbose)
        except OSError as e:
            print(f"Error: failed to write {self.output_file}: {e}")
            return False
        return True

    def generate_protocol_tables(self, methods: bool, capabilities: bool) -> bool:
        if not methods and not capabilities:
            return True
        if not self.protocol:
            print("Error: No protocol available. Load the schema first.")
            return False
        try:
            block = generate_protocol_block(self.protocol, methods, capabilities)
        except ValueError as e:
            print(f"Error: {e}")
            return False
        try:
            patch_protocol_file(self.protocol_file, block, self.verbose)
        except OSError as e:
            print(f"Error: failed to write {self.protocol_file}: {e}")
            return False
        return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate lua-ls annotations for the Language Server Protocol",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('command', nargs='?', help='Command to run (gen)')
    parser.add_argument('--out', default=DEFAULT_OUTPUT_FILE, help='Annotation file to write')
    parser.add_argument('--version', default=DEFAULT_LSP_VERSION, help='LSP version of the metaModel')
    parser.add_argument('--methods', action='store_true', help='Regenerate the method tables in protocol.lua')
    parser.add_argument('--capabilities', action='store_true', help='Regenerate the capability table in protocol.lua')
    parser.add_argument('--schema', help='Local metaModel.json to read instead of downloading')
    parser.add_argument('--protocol-file', default=DEFAULT_PROTOCOL_FILE, help='File patched by --methods/--capabilities')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output for debugging')
    return parser


def parse_arguments(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is not None and args.command not in COMMANDS:
        parser.error(f"Unknown command: {args.command}")

    # Override with environment variables if set
    args.version = os.environ.get('GEN_LSP_VERSION', args.version)
    args.out = os.environ.get('GEN_LSP_OUT', args.out)
    args.schema = os.environ.get('GEN_LSP_SCHEMA', args.schema)
    args.protocol_file = os.environ.get('GEN_LSP_PROTOCOL_FILE', args.protocol_file)
    if 'GEN_LSP_VERBOSE' in os.environ:
        args.verbose = os.environ['GEN_LSP_VERBOSE'].strip().lower() not in ('', '0', 'false', 'no')
    return args


def main(argv=None) -> int:
    args = parse_arguments(argv)
    if args.command is None:
        print(__doc__)
        return 0

    converter = LspAnnotationConverter(args.version, args.out, args.protocol_file, args.schema, args.verbose)
    if not converter.load_schema():
        return 1
    if not converter.generate_protocol_tables(args.methods, args.capabilities):
        return 1
    if not converter.generate_annotations():
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
