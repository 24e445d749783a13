#
# oldlogzipper
#
# A small CLI tool to gzip old, rotated log files in place while keeping the newest ones per pattern.
#
# Licensed under the MIT License.
#

import argparse
import gzip
import os
import re
import shutil
import stat
import sys
import traceback
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from types import SimpleNamespace
from typing import NoReturn, Optional, Protocol, TextIO, no_type_check


VERSION: str = "dev-1.0.0"

COMPRESSED_SUFFIX: str = ".gz"
DUPLICATE_INFIX: str = ".duplicated"
TEMP_SUFFIX: str = ".tmp"

PROC_ROOT: Path = Path("/proc")

DEFAULT_KEEP: int = 2

DEFAULT_PATTERNS: str = r"""# oldlogzipper default patterns
#
# One regular expression per line, searched in each file name of the target directory.
# Empty lines and lines starting with '#' are ignored. The first matching pattern wins,
# the newest files of every pattern are kept uncompressed (see --keep).
#
# numbered rotations: app.log.1, messages.3
^.+\.log\.\d+$
^(messages|syslog|secure|maillog|cron|debug|spooler)\.\d+$
# dated rotations: app.log-20250131, access.log.2025-01-31, messages-20250131
^.+\.log[-.]\d{4}-?\d{2}-?\d{2}$
^(messages|syslog|secure|maillog|cron|debug|spooler|boot\.log)-\d{8}$
# leftovers of manual rotations
^.+\.log\.(old|bak)$
"""


class IntegrityCheckFailedError(Exception):
    pass


class PatternSourceError(Exception):
    pass


class AttributesUnsupportedError(Exception):
    pass


class CompressionError(Exception):
    step: str
    source: Path

    def __init__(self, step: str, source: Path, cause: Exception) -> None:
        super().__init__(f"Compressing '{source}' failed at step '{step}': {cause}")
        self.step = step
        self.source = source


class ConfigNamespace(SimpleNamespace):
    pass


class LogLevel(IntEnum):
    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3

    @classmethod
    def from_name_or_number(cls, prefix: str) -> "LogLevel":
        try:
            return next(m for m in cls if m.name.startswith(prefix.upper()))
        except StopIteration:
            try:
                return cls(int(prefix))
            except ValueError:
                raise ValueError("Invalid log level: " + prefix)


class Logger:
    _args: ConfigNamespace
    _decisions: dict[Path, str]

    def __init__(self, args: ConfigNamespace) -> None:
        self._args = args
        self._decisions = {}

    def has_log_level(self, level: LogLevel) -> bool:
        return level <= int(self._args.verbose)

    def _raw_verbose(self, level: LogLevel, message: str, file: Optional[TextIO] = None, prefix: str = "") -> None:
        print(f"[{prefix or LogLevel(level).name}] {message}", file=file or sys.stderr)

    def verbose(self, level: LogLevel, message: str, file: Optional[TextIO] = None, prefix: str = "") -> None:
        if self.has_log_level(level):
            self._raw_verbose(level, message, file, prefix)

    def add_decision(self, level: LogLevel, file: Path, message: str, debug: Optional[str] = None) -> None:
        if self.has_log_level(level):
            # Details only with debug log level
            self._decisions[file] = message + (f" ({debug})" if debug is not None and self.has_log_level(LogLevel.DEBUG) else "")

    def print_decisions(self) -> None:
        if not self._decisions:
            return
        longest_file_name_length = max(len(p.name) for p in self._decisions)
        for file in sorted(self._decisions, key=lambda p: p.name):
            self._raw_verbose(LogLevel.INFO, f"{file.name:<{longest_file_name_length}}: {self._decisions[file]}")
        self._decisions.clear()


def format_size(bytes: int) -> str:
    units = ["", "K", "M", "G", "T", "E", "P"]
    idx, value = 0, float(bytes)
    while value >= 1024 and idx < len(units) - 1:
        value /= 1024
        idx += 1
    return f"{value:.2f}".rstrip("0").rstrip(".") + units[idx]


class ModernHelpFormatter(argparse.HelpFormatter):
    @no_type_check
    def __init__(self, *a, **kw) -> None:  # noqa: ANN002, ANN003
        super().__init__(*a, max_help_position=36, width=160, **kw)

    @no_type_check
    def start_section(self, heading) -> None:  # noqa: ANN001
        super().start_section(heading.capitalize())


class ModernStrictArgumentParser(argparse.ArgumentParser):
    @no_type_check
    def __init__(self, *a, **kw) -> None:  # noqa: ANN002, ANN003
        super().__init__(*a, **kw)
        self._errors: list[str] = []

    def add_error(self, msg: str) -> None:
        if msg not in self._errors:
            self._errors.append(msg)

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        print("\nError(s):", file=sys.stderr)
        for line in message.split("\n"):
            print(f"  • {line}", file=sys.stderr)
        print("\nHint: Try '--help' for more information.", file=sys.stderr)
        sys.exit(2)

    # Argument type helpers
    def non_negative_int_argument(self, value: str) -> int:
        try:
            int_value = int(value)
            if int_value < 0:
                raise ValueError
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid value '{value}': must be an integer >= 0")
        return int_value

    def verbose_argument(self, value: str) -> LogLevel:
        try:
            return LogLevel.from_name_or_number(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid verbose value '{value}' (use ERROR, WARN, INFO, DEBUG or 0, 1, 2, 3)")

    # Internal helper methods
    def _suggest(self, argument: str) -> list[str]:
        opts = [o for a in self._actions for o in a.option_strings if o.startswith("--")]
        cand = [o for o in opts if abs(len(o) - len(argument)) <= 2 and sum(a != b for a, b in zip(o, argument)) <= 2]
        return cand[:1]

    @no_type_check
    def _collect_raw_args(self, args):  # noqa: ANN202, ANN001
        if args is not None:
            return list(args)
        return sys.argv[1:]  # default argparse behavior

    @no_type_check
    def _detect_duplicate_flags(self, raw_args) -> None:  # noqa: ANN001
        # Normalize option strings
        alias = {opt: action.option_strings[0] for action in self._actions for opt in action.option_strings}
        seen = set()

        for tok in raw_args:
            if not tok.startswith("-") or tok == "-":
                continue

            # Extract option (handles -k3, -k=3, --keep=3)
            opt = tok.split("=", 1)[0]

            # Handle -k3 → -k
            if len(opt) > 2 and opt.startswith("-") and not opt.startswith("--"):
                opt = opt[:2]

            key = alias.get(opt, opt)

            if key in seen:
                self.add_error(f"Duplicate flag: {key}")
            seen.add(key)

    @no_type_check
    def _validate_arguments(self, ns) -> None:  # noqa: ANN001
        # Default verbosity, if none given
        if ns.verbose is None:
            ns.verbose = LogLevel.INFO if not ns.list_only else LogLevel.ERROR

        # debug is a shortcut for verbose DEBUG
        if ns.debug:
            ns.verbose = LogLevel.DEBUG

        # normalize 0-byte separator
        if ns.list_only == "\\0":
            ns.list_only = "\0"

        # list-only implies dry-run
        if ns.list_only:
            ns.dry_run = True

        # incompatible options (list-only and verbose > ERROR)
        if ns.list_only and ns.verbose > LogLevel.ERROR:
            self.add_error("--list-only and --verbose/--debug (> ERROR) cannot be used together")

        # directories are only optional for printing the default patterns
        if not ns.directories and not ns.show_default_patterns:
            self.add_error("At least one directory is required")

    # Main hook
    @no_type_check
    def parse_known_args(self, args=None, namespace=None) -> tuple[argparse.Namespace, list[str]]:  # noqa: ANN001
        self._errors = []
        raw_args = self._collect_raw_args(args)
        self._detect_duplicate_flags(raw_args)

        ns, unknown = super().parse_known_args(raw_args, namespace or argparse.Namespace())

        if unknown:
            sug = self._suggest(unknown[0])
            if sug:
                self.add_error(f"Unknown option: {unknown[0]} (did you mean {sug[0]}?)")
            else:
                self.add_error(f"Unknown option: {unknown[0]}")

        self._validate_arguments(ns)

        if self._errors:
            msg = "\n".join(f"{e}" for e in self._errors)
            self.error(msg)

        return ns, unknown


def create_parser() -> ModernStrictArgumentParser:
    parser: ModernStrictArgumentParser = ModernStrictArgumentParser(
        description=f"oldlogzipper {VERSION}\n\nCompress old rotated log files in place, keeping the newest files per pattern",
        usage=("oldlogzipper <dir1> <dir2> ... [options]\n\nExample:\n  oldlogzipper /var/log -k 3 -P"),
        epilog="Compressed files replace their sources unless --dry-run or --list-only is set.",
        formatter_class=ModernHelpFormatter,
        add_help=False,
    )

    g_main = parser.add_argument_group("Main arguments")
    g_sel = parser.add_argument_group("Selection arguments")
    g_behavior = parser.add_argument_group("Behavior arguments")
    g_common = parser.add_argument_group("Common arguments")

    # positional arguments
    g_main.add_argument("directories", nargs="*", metavar="dir", help="Directories to scan (recursion is not supported)")

    # selection arguments
    g_sel.add_argument("--pattern-file", "-f", type=str, default=None, metavar="file", help="File with one regex per line (default: embedded patterns)")
    g_sel.add_argument("--keep", "-k", type=parser.non_negative_int_argument, default=DEFAULT_KEEP, metavar="N", help=f"Keep the N most recently modified files per pattern (default: {DEFAULT_KEEP})")

    # behavior flags
    g_behavior.add_argument("--preserve-attrs", "-P", action="store_true", help="Apply owner, group and mode of the source file to the compressed file")
    g_behavior.add_argument("--dry-run", "-n", action="store_true", help="Show planned actions but do not compress any files")
    # fmt: off
    g_behavior.add_argument("--list-only", "-L", nargs="?", const="\n", default=None, metavar="sep",
        help="Output only file paths that would be compressed (implies --dry-run, incompatible with --verbose) (optional separator (sep): e.g. '\\0')")
    g_behavior.add_argument("--verbose", "-V", type=parser.verbose_argument, default=None, nargs="?", const=LogLevel.INFO, metavar="lev",
        help="Verbosity level: 0 = error, 1 = warn, 2 = info, 3 = debug (default: 'info'; use numbers or names)")
    # fmt: on
    g_behavior.add_argument("--debug", "-D", action="store_true", help="Debug log (same as --verbose debug)")

    # common flags
    g_common.add_argument("--show-regx-default-content", action="store_true", dest="show_default_patterns", help="Print the embedded default patterns and exit")
    g_common.add_argument("--version", "-R", action="version", version=f"%(prog)s {VERSION}")
    g_common.add_argument("--help", "-h", action="help", help="Show this help message and exit")
    g_common.add_argument("--stacktrace", action="store_true", help=argparse.SUPPRESS)

    return parser


def parse_arguments(argv: Optional[list[str]] = None) -> ConfigNamespace:
    parser = create_parser()
    args = parser.parse_args(argv)
    return ConfigNamespace(**vars(args))


def load_pattern_source(args: ConfigNamespace) -> str:
    if not args.pattern_file:
        return DEFAULT_PATTERNS
    try:
        return Path(args.pattern_file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PatternSourceError(f"Pattern file could not be read: {args.pattern_file} ({e})") from e


def load_patterns(text: str, logger: Logger) -> list[re.Pattern[str]]:
    patterns: list[re.Pattern[str]] = []
    for line in text.splitlines():
        if not line or line.startswith("#"):
            continue
        try:
            patterns.append(re.compile(line))
        except re.error as e:
            logger.verbose(LogLevel.WARN, f"Invalid regular expression ignored: {line} ({e})")
            continue
        logger.verbose(LogLevel.DEBUG, f"Pattern {len(patterns):02d}: {line}")
    return patterns


class OpenFileProber(Protocol):
    def open_files(self, directory: Path) -> set[Path]: ...


def _has_prefix(path: str, directory: Path) -> bool:
    # Textual prefix, so a sibling like '/var/log2' also matches '/var/log'
    return path.startswith(str(directory))


class ProcOpenFileProber:
    _proc_root: Path

    def __init__(self, proc_root: Path = PROC_ROOT) -> None:
        self._proc_root = proc_root

    def open_files(self, directory: Path) -> set[Path]:
        found: set[Path] = set()
        try:
            processes = [p for p in self._proc_root.iterdir() if p.name.isdigit()]
        except OSError:  # No process table (e.g. not Linux)
            return found
        for process in processes:
            try:
                descriptors = list((process / "fd").iterdir())
            except OSError:  # Permission denied or process already gone
                continue
            for descriptor in descriptors:
                try:
                    target = os.readlink(descriptor)
                except OSError:
                    continue
                if not os.path.isabs(target):  # pipe:[...], socket:[...], anon_inode:...
                    continue
                target = os.path.normpath(target)
                if _has_prefix(target, directory):
                    found.add(Path(target))
        return found


class StaticOpenFileProber:
    _paths: frozenset[Path]

    def __init__(self, paths: Iterable[Path] = ()) -> None:
        self._paths = frozenset(Path(os.path.abspath(p)) for p in paths)

    def open_files(self, directory: Path) -> set[Path]:
        return {p for p in self._paths if _has_prefix(str(p), directory)}


def symlink_targets(directory: Path) -> set[Path]:
    targets: set[Path] = set()
    try:
        entries = list(directory.iterdir())
    except OSError:
        return targets
    for entry in entries:
        if not entry.is_symlink():
            continue
        try:
            destination = os.readlink(entry)
        except OSError:
            continue
        # Relative destinations are relative to the directory of the link
        targets.add(Path(os.path.normpath(os.path.join(directory, destination))))
    return targets


@dataclass(frozen=True)
class Exclusions:
    symlink_targets: frozenset[Path] = frozenset()
    open_files: frozenset[Path] = frozenset()


def probe_exclusions(directory: Path, prober: OpenFileProber, logger: Logger) -> Exclusions:
    exclusions = Exclusions(frozenset(symlink_targets(directory)), frozenset(prober.open_files(directory)))
    if logger.has_log_level(LogLevel.DEBUG):
        for path in sorted(exclusions.symlink_targets):
            logger.verbose(LogLevel.DEBUG, f"Linked: {path}")
        for path in sorted(exclusions.open_files):
            logger.verbose(LogLevel.DEBUG, f"Opened: {path}")
    return exclusions


@dataclass(frozen=True)
class FileRecord:
    name: str
    path: Path
    mtime: float


def sort_records(records: Iterable[FileRecord]) -> list[FileRecord]:
    return sorted(records, key=lambda record: record.mtime)  # stable, oldest first


def is_compressed_name(name: str) -> bool:
    return name.endswith(COMPRESSED_SUFFIX) or name.endswith(COMPRESSED_SUFFIX + TEMP_SUFFIX)


def read_records(directory: Path, logger: Logger) -> list[FileRecord]:
    records: list[FileRecord] = []
    for file in sorted(directory.iterdir()):
        try:
            file_stat = file.lstat()
        except OSError as e:  # Catch stat error, print it, and continue
            logger.verbose(LogLevel.WARN, f"Error while reading file info of '{file.name}': {e}")
            continue
        if stat.S_ISDIR(file_stat.st_mode):
            continue
        if is_compressed_name(file.name):
            logger.verbose(LogLevel.DEBUG, f"Skipping already compressed file: {file.name}")
            continue
        records.append(FileRecord(file.name, file, file_stat.st_mtime))
    return records


@dataclass
class SelectionResult:
    compress: list[Path]
    retained: set[Path] = field(default_factory=set)
    unmatched: list[Path] = field(default_factory=list)


class RetentionSelector:
    _records: list[FileRecord]
    _patterns: list[re.Pattern[str]]
    _exclusions: Exclusions
    _compress: list[Path]
    _retained: set[Path]
    _unmatched: list[Path]
    _args: ConfigNamespace
    _logger: Logger

    def __init__(self, records: list[FileRecord], patterns: list[re.Pattern[str]], exclusions: Exclusions, args: ConfigNamespace, logger: Logger) -> None:
        self._records = records
        self._patterns = patterns
        self._exclusions = exclusions
        self._compress = []
        self._retained = set()
        self._unmatched = []
        self._args = args
        self._logger = logger

    def _create_buckets(self) -> list[list[FileRecord]]:
        buckets: list[list[FileRecord]] = [[] for _ in self._patterns]
        for record in self._records:
            index = next((idx for idx, pattern in enumerate(self._patterns) if pattern.search(record.name)), None)  # first match wins
            if index is None:
                self._logger.add_decision(LogLevel.DEBUG, record.path, "Ignoring: no pattern matched")
                self._unmatched.append(record.path)
                continue
            buckets[index].append(record)
        return buckets

    def _retain(self, record: FileRecord, level: LogLevel, message: str, pattern: str) -> None:
        self._retained.add(record.path)
        self._logger.add_decision(level, record.path, message, debug=f"pattern: '{pattern}', mtime: {datetime.fromtimestamp(record.mtime)}")

    def _process_bucket(self, pattern: str, bucket: list[FileRecord]) -> None:
        keep = self._args.keep
        if len(bucket) <= keep:
            for record in bucket:
                self._retain(record, LogLevel.DEBUG, f"Keeping: {len(bucket):02d} files matched, not more than {keep:02d}", pattern)
            return

        ordered = sort_records(bucket)
        cut = len(ordered) - keep
        for index, record in enumerate(reversed(ordered[cut:]), start=1):
            self._retain(record, LogLevel.DEBUG, f"Keeping newest {index:02d}/{keep:02d}", pattern)
        for record in ordered[:cut]:
            if record.path in self._exclusions.symlink_targets:
                self._retain(record, LogLevel.INFO, "Keeping: target of a symbolic link", pattern)
            elif record.path in self._exclusions.open_files:
                self._retain(record, LogLevel.INFO, "Keeping: opened by a process", pattern)
            else:
                self._compress.append(record.path)
                self._logger.add_decision(LogLevel.INFO, record.path, f"{'Would compress' if self._args.dry_run else 'Compressing'}: older than newest {keep:02d}", debug=f"pattern: '{pattern}', mtime: {datetime.fromtimestamp(record.mtime)}")

    def process_selection(self) -> SelectionResult:
        # Buckets are processed in pattern order, so is the resulting compress list
        for pattern, bucket in zip(self._patterns, self._create_buckets()):
            self._process_bucket(pattern.pattern, bucket)

        # Simple integrity checks
        matched = len(self._records) - len(self._unmatched)
        if not matched == len(self._retained) + len(self._compress):
            raise IntegrityCheckFailedError(f"File count mismatch: some files are neither kept nor compressed (matched: {matched}, keep: {len(self._retained)}, compress: {len(self._compress)})!!")
        if any(path in self._exclusions.symlink_targets or path in self._exclusions.open_files for path in self._compress):
            raise IntegrityCheckFailedError("Linked or opened file selected for compression!!")

        return SelectionResult(self._compress, self._retained, self._unmatched)


class AttributeApplier(Protocol):
    def apply(self, path: Path, source_stat: os.stat_result) -> None: ...


class PosixAttributeApplier:
    def apply(self, path: Path, source_stat: os.stat_result) -> None:
        os.chmod(path, stat.S_IMODE(source_stat.st_mode))
        os.chown(path, source_stat.st_uid, source_stat.st_gid)


class UnsupportedAttributeApplier:
    def apply(self, path: Path, source_stat: os.stat_result) -> None:
        raise AttributesUnsupportedError(f"Preserving owner and mode is not supported on this platform ({sys.platform})")


def default_attribute_applier() -> AttributeApplier:
    return PosixAttributeApplier() if hasattr(os, "chown") else UnsupportedAttributeApplier()


def next_free_destination(source: Path) -> Path:
    destination = source.with_name(source.name + COMPRESSED_SUFFIX)
    number = 1
    while destination.exists():
        destination = source.with_name(f"{source.name}{DUPLICATE_INFIX}{number}{COMPRESSED_SUFFIX}")
        number += 1
    return destination


def compress_file(source: Path, preserve_attrs: bool = False, applier: Optional[AttributeApplier] = None) -> Path:
    destination = next_free_destination(source)
    temp = destination.with_name(destination.name + TEMP_SUFFIX)

    try:
        source_stat = source.stat()
        src = source.open("rb")
    except OSError as e:
        raise CompressionError("open", source, e) from e

    with src:
        try:
            with temp.open("wb") as raw:
                with gzip.GzipFile(filename=source.name, mode="wb", fileobj=raw, mtime=int(source_stat.st_mtime)) as gz:
                    shutil.copyfileobj(src, gz)
                raw.flush()
                os.fsync(raw.fileno())
        except OSError as e:
            temp.unlink(missing_ok=True)
            raise CompressionError("copy", source, e) from e

    try:
        temp.rename(destination)
    except OSError as e:
        temp.unlink(missing_ok=True)
        raise CompressionError("rename", source, e) from e

    # Source is removed only after the compressed file is in place
    try:
        source.unlink()
    except OSError as e:
        raise CompressionError("remove", source, e) from e

    if preserve_attrs:
        try:
            (applier or default_attribute_applier()).apply(destination, source_stat)
        except (OSError, AttributesUnsupportedError) as e:
            raise CompressionError("attributes", source, e) from e

    return destination


def validate_directory(path: str) -> Path:
    directory = Path(path)
    if not directory.exists():
        raise FileNotFoundError(f"Path not found: {directory}")
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")
    return Path(os.path.abspath(directory))


def run_compression(file: Path, args: ConfigNamespace, logger: Logger, applier: Optional[AttributeApplier] = None) -> bool:
    if args.list_only:
        print(file, end=args.list_only)  # List mode
        return True
    if args.dry_run:
        logger.verbose(LogLevel.DEBUG, f"DRY-RUN COMPRESS: {file.name}")  # Just simulate compression
        return True
    try:
        size = file.lstat().st_size
        destination = compress_file(file, args.preserve_attrs, applier)
    except (OSError, CompressionError) as e:  # Catch compression error, print it, and continue
        logger.verbose(LogLevel.WARN, f"Error while compressing file '{file.name}': {e}")
        return False
    logger.verbose(LogLevel.DEBUG, f"COMPRESSED: {file.name} -> {destination.name} ({format_size(size)} -> {format_size(destination.lstat().st_size)})")
    return True


def process_directory(directory: Path, patterns: list[re.Pattern[str]], args: ConfigNamespace, logger: Logger, prober: OpenFileProber, applier: Optional[AttributeApplier] = None) -> int:
    exclusions = probe_exclusions(directory, prober, logger)
    records = read_records(directory, logger)
    logger.verbose(LogLevel.DEBUG, f"Found {len(records)} files in '{directory}'")

    result = RetentionSelector(records, patterns, exclusions, args, logger).process_selection()
    logger.print_decisions()

    done = sum(1 for file in result.compress if run_compression(file, args, logger, applier))

    if args.dry_run:
        logger.verbose(LogLevel.INFO, f"{done} files to compress in '{directory}'")
    else:
        logger.verbose(LogLevel.INFO, f"{done} files compressed in '{directory}'")
        if done < len(result.compress):
            logger.verbose(LogLevel.WARN, f"{len(result.compress) - done} files could not be compressed in '{directory}'")
    return done


def run(args: ConfigNamespace, logger: Logger, prober: OpenFileProber, applier: Optional[AttributeApplier] = None) -> dict[Path, int]:
    directories = [validate_directory(d) for d in args.directories]  # all or nothing, before touching any file
    patterns = load_patterns(load_pattern_source(args), logger)
    if not patterns:
        logger.verbose(LogLevel.WARN, "No valid patterns loaded, nothing will be compressed")
    return {directory: process_directory(directory, patterns, args, logger, prober, applier) for directory in directories}


def handle_exception(exception: Exception, exit_code: int, stacktrace: bool, prefix: str = "") -> None:
    if stacktrace:
        traceback.print_exc()
    print(f"[{prefix or LogLevel.ERROR.name}] {exception}", file=sys.stderr)
    sys.exit(exit_code)


def main() -> None:
    args: Optional[ConfigNamespace] = None

    try:
        args = parse_arguments()

        if args.show_default_patterns:
            print(DEFAULT_PATTERNS, end="")
            return

        logger = Logger(args)
        logger.verbose(LogLevel.DEBUG, f"Parsed arguments: {args}")

        run(args, logger, ProcOpenFileProber(), default_attribute_applier())

    except PatternSourceError as e:
        handle_exception(e, 3, args.stacktrace if args is not None else True)
    except OSError as e:
        handle_exception(e, 1, args.stacktrace if args is not None else True)
    except ValueError as e:
        handle_exception(e, 2, args.stacktrace if args is not None else True)
    except IntegrityCheckFailedError as e:
        handle_exception(e, 7, args.stacktrace if args is not None else True)
    except Exception as e:
        handle_exception(e, 9, args.stacktrace if args is not None else True, prefix="UNEXPECTED ERROR")


if __name__ == "__main__":
    main()
