import argparse
import json
import os
import sys
from typing import Any, Dict, List

from pydantic import ValidationError

from textgrep.core.directory_search import directory_grep, project_grep
from textgrep.core.errors import SearchError
from textgrep.core.file_search import file_grep
from textgrep.core.models import FileSearchResult
from textgrep.core.schemas import DirectoryGrepArgs, FileGrepArgs, ProjectGrepArgs
from textgrep.core.utils.file import parse_size
from textgrep.core.utils.logging import configure_logging
from textgrep.version import __version__

EXIT_MATCH = 0
EXIT_NO_MATCH = 1
EXIT_ERROR = 2


def _size_arg(value: str) -> int:
    try:
        return parse_size(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _add_search_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--regex", action="store_true", help="Treat PATTERN as a regular expression")
    p.add_argument("--flags", default=None, help="Regex flags (default: i)")
    p.add_argument("--case-sensitive", action="store_true")
    p.add_argument("--max-results", type=int, default=None)
    p.add_argument("-C", "--context", type=int, default=None, help="Context lines (0-10)")


def _add_directory_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--type", dest="file_types", action="append", default=None, help="File extension, repeatable")
    p.add_argument("--no-recursive", action="store_true")
    p.add_argument("--exclude", dest="exclude_patterns", action="append", default=None, help="Exclude substring, repeatable")
    p.add_argument("--include-hidden", action="store_true")
    p.add_argument("--max-file-size", type=_size_arg, default=None, help="e.g. 5MB")
    p.add_argument("--follow-symlinks", action="store_true")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="textgrep", description="Search text in files and directory trees.")
    parser.add_argument("--version", action="version", version=f"textgrep {__version__}")
    parser.add_argument("--log-level", default="", help="Override TEXTGREP_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    p_file = sub.add_parser("file", help="Search a single file")
    p_file.add_argument("path")
    p_file.add_argument("pattern")
    _add_search_flags(p_file)

    p_dir = sub.add_parser("dir", help="Search a directory tree")
    p_dir.add_argument("path")
    p_dir.add_argument("pattern")
    _add_search_flags(p_dir)
    _add_directory_flags(p_dir)

    p_proj = sub.add_parser("project", help="Search the project root")
    p_proj.add_argument("pattern")
    p_proj.add_argument("--root", default=None, help="Project root (default: TEXTGREP_PROJECT_ROOT)")
    _add_search_flags(p_proj)
    _add_directory_flags(p_proj)
    return parser


def _collect_options(ns: argparse.Namespace) -> Dict[str, Any]:
    """Only flags the user actually passed; the rest stay unset."""
    opts: Dict[str, Any] = {}
    if ns.regex:
        opts["use_regex"] = True
    if ns.flags is not None:
        opts["regex_flags"] = ns.flags
    if ns.case_sensitive:
        opts["case_sensitive"] = True
    if ns.max_results is not None:
        opts["max_results"] = ns.max_results
    if ns.context is not None:
        opts["context_lines"] = ns.context
    if ns.command in ("dir", "project"):
        if ns.file_types:
            opts["file_types"] = ns.file_types
        if ns.no_recursive:
            opts["recursive"] = False
        if ns.exclude_patterns is not None:
            opts["exclude_patterns"] = ns.exclude_patterns
        if ns.include_hidden:
            opts["include_hidden"] = True
        if ns.max_file_size is not None:
            opts["max_file_size_bytes"] = ns.max_file_size
        if ns.follow_symlinks:
            opts["follow_symlinks"] = True
    return opts


def to_display_path(path: str, base: str) -> str:
    """Relative form of ``path`` when it lies under ``base``, else unchanged."""
    abs_path = os.path.abspath(path)
    abs_base = os.path.abspath(base)
    if abs_path == abs_base or abs_path.startswith(abs_base.rstrip(os.sep) + os.sep):
        return os.path.relpath(abs_path, abs_base)
    return path


def _display_file_result(result: FileSearchResult) -> Dict[str, Any]:
    data = result.to_result_dict()
    data["path"] = to_display_path(result.path, os.getcwd())
    return data


def run(ns: argparse.Namespace) -> int:
    opts = _collect_options(ns)

    if ns.command == "file":
        args = FileGrepArgs(file_path=ns.path, pattern=ns.pattern, options=opts)
        result = file_grep(args.file_path, args.pattern, args.options.to_options())
        payload = _display_file_result(result)
        found = result.match_count
    elif ns.command == "dir":
        args = DirectoryGrepArgs(dir_path=ns.path, pattern=ns.pattern, options=opts)
        result = directory_grep(args.dir_path, args.pattern, args.options.to_options())
        payload = result.to_result_dict()
        found = result.total_matches
    else:
        args = ProjectGrepArgs(pattern=ns.pattern, options=opts or None)
        options = args.options.to_options() if args.options else None
        result = project_grep(args.pattern, options, project_root=ns.root)
        payload = result.to_result_dict()
        found = result.total_matches

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return EXIT_MATCH if found else EXIT_NO_MATCH


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    configure_logging(level=ns.log_level)
    try:
        return run(ns)
    except ValidationError as e:
        for err in e.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()))
            print(f"error: {loc}: {err.get('msg')}", file=sys.stderr)
        return EXIT_ERROR
    except (OSError, SearchError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
