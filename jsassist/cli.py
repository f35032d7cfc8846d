"""Command-line entry point for content assist requests."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field

from .assist import ContentAssistProvider
from .frontend.parse import ParseError
from .indexer import MemoryIndexer
from .model import Summary
from .serialize import to_json
from .verify import check_modules

MODES: list[str] = ["proposals", "hover", "definition", "summary", "verify"]

USAGE: str = """\
jsassist [OPTIONS] [INPUT] [-o OUTPUT]

Options:
  --mode MODE         Request: proposals, hover, definition, summary, verify
                      (default: proposals)
  --offset N          Cursor offset (default: end of input)
  --prefix TEXT       Completion prefix (default: identifier text before offset)
  --name NAME         File identifier for summaries (default: INPUT or "local")
  --global FILE       Add FILE as a global dependency (repeatable)
  --module NAME=FILE  Make FILE resolvable as module NAME (repeatable);
                      a FILE ending in .json is read as a stored summary
  --verbose           Debug logging to stderr
  -o, --output FILE   Write output to FILE instead of stdout
  --help              Show this help message
"""


@dataclass
class Options:
    mode: str = "proposals"
    offset: int | None = None
    prefix: str | None = None
    name: str | None = None
    globals: list[str] = field(default_factory=list)
    modules: list[tuple[str, str]] = field(default_factory=list)
    verbose: bool = False
    input_file: str | None = None
    output_file: str | None = None


def read_source(input_file: str | None) -> tuple[str, int]:
    """Read source from file or stdin. Returns (source, exit_code) where exit_code 0 means OK."""
    if input_file is not None:
        try:
            with open(input_file, "rb") as f:
                raw = f.read()
        except OSError:
            print("error: cannot open '" + input_file + "'", file=sys.stderr)
            return ("", 1)
    else:
        raw = sys.stdin.buffer.read()
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("error: invalid utf-8 in input", file=sys.stderr)
        return ("", 1)
    return (source, 0)


def write_output(output: str, output_file: str | None) -> int:
    """Write output to file or stdout. Returns 0 on success, 1 on error."""
    if output_file is not None:
        try:
            with open(output_file, "w") as f:
                f.write(output + "\n")
        except OSError:
            print("error: cannot write '" + output_file + "'", file=sys.stderr)
            return 1
        return 0
    print(output)
    return 0


def default_prefix(source: str, offset: int) -> str:
    """Identifier characters immediately before offset."""
    start = offset
    while start > 0 and (source[start - 1].isalnum() or source[start - 1] in "_$"):
        start -= 1
    return source[start:offset]


def build_indexer(options: Options) -> tuple[MemoryIndexer | None, int]:
    """Indexer over the dependency files named on the command line."""
    indexer = MemoryIndexer()
    for path in options.globals:
        source, err = read_source(path)
        if err != 0:
            return (None, err)
        indexer.global_sources[path] = source
    for name, path in options.modules:
        source, err = read_source(path)
        if err != 0:
            return (None, err)
        if path.endswith(".json"):
            try:
                summary = Summary.from_dict(json.loads(source))
            except ValueError as e:
                print("error: bad summary '" + path + "': " + str(e), file=sys.stderr)
                return (None, 1)
            indexer.add_summary(name, summary)
        else:
            indexer.add_module(name, source)
    return (indexer, 0)


def run_request(source: str, options: Options, indexer: MemoryIndexer) -> tuple[int, str]:
    """Answer one request. Returns (exit_code, output)."""
    offset = options.offset if options.offset is not None else len(source)
    if offset < 0 or offset > len(source):
        print("error: offset " + str(offset) + " is outside the input", file=sys.stderr)
        return (2, "")
    provider = ContentAssistProvider(indexer)
    try:
        if options.mode == "proposals":
            prefix = options.prefix
            if prefix is None:
                prefix = default_prefix(source, offset)
            proposals = provider.compute_proposals(source, offset, prefix)
            return (0, to_json([p.to_dict() for p in proposals]))
        if options.mode == "hover":
            return (0, to_json({"hover": provider.compute_hover(source, offset)}))
        if options.mode == "definition":
            result = provider.find_definition(source, offset)
            return (0, to_json(result.to_dict() if result is not None else None))
        if options.mode == "summary":
            name = options.name or options.input_file or "local"
            return (0, to_json(provider.compute_summary(source, name).to_dict()))
        diagnostics = check_modules(source, indexer)
        return (0, to_json([d.to_dict() for d in diagnostics]))
    except ParseError as e:
        print("error:" + str(e.lineno) + ":" + str(e.col) + ": " + e.msg, file=sys.stderr)
        return (1, "")


def _require_value(args: list[str], i: int) -> str:
    if i + 1 >= len(args):
        print("error: " + args[i] + " requires an argument", file=sys.stderr)
        sys.exit(2)
    return args[i + 1]


def parse_args(argv: list[str] | None = None) -> Options:
    """Parse command-line arguments."""
    args = sys.argv[1:] if argv is None else argv
    options = Options()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            sys.exit(0)
        elif arg == "--mode":
            options.mode = _require_value(args, i)
            i += 2
        elif arg == "--offset":
            value = _require_value(args, i)
            try:
                options.offset = int(value)
            except ValueError:
                print("error: --offset expects an integer, got '" + value + "'", file=sys.stderr)
                sys.exit(2)
            i += 2
        elif arg == "--prefix":
            options.prefix = _require_value(args, i)
            i += 2
        elif arg == "--name":
            options.name = _require_value(args, i)
            i += 2
        elif arg == "--global":
            options.globals.append(_require_value(args, i))
            i += 2
        elif arg == "--module":
            value = _require_value(args, i)
            name, sep, path = value.partition("=")
            if sep == "" or name == "" or path == "":
                print("error: --module expects NAME=FILE, got '" + value + "'", file=sys.stderr)
                sys.exit(2)
            options.modules.append((name, path))
            i += 2
        elif arg == "--verbose":
            options.verbose = True
            i += 1
        elif arg == "-o" or arg == "--output":
            options.output_file = _require_value(args, i)
            i += 2
        elif arg.startswith("-"):
            print("error: unknown flag '" + arg + "'", file=sys.stderr)
            sys.exit(2)
        else:
            if options.input_file is not None:
                print("error: unexpected argument '" + arg + "'", file=sys.stderr)
                sys.exit(2)
            options.input_file = arg
            i += 1
    if options.mode not in MODES:
        print("error: unknown mode '" + options.mode + "'", file=sys.stderr)
        sys.exit(2)
    return options


def main() -> int:
    """Main entry point."""
    options = parse_args()
    if options.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    source, err = read_source(options.input_file)
    if err != 0:
        return err
    indexer, err = build_indexer(options)
    if indexer is None:
        return err
    exit_code, output = run_request(source, options, indexer)
    if exit_code != 0:
        return exit_code
    return write_output(output, options.output_file)


if __name__ == "__main__":
    sys.exit(main())
