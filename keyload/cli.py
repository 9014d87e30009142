#!/usr/bin/env python3
"""
keyload command line.

Loads key files into the keyserver's storage outside of reconciliation:

    keyload [-config keyload.yaml] [-cpuprof] [-memprof] <file1> [file2 .. fileN]

Any startup failure (no files, bad settings, storage or peer unavailable)
is fatal. Once loading starts every pattern is processed, then the
reconciliation peer's stats are refreshed and the process exits.
"""

from __future__ import annotations
from typing import List, NoReturn, Optional
import argparse, sys
from keyload.errors import ParseError, PeerError, StorageConnectionError, StorageError, UsageError
from keyload.loader import load_patterns
from keyload.logger import get_logger
from keyload.profiling import ProfilingState, ProfilingToggle
from keyload.recon import new_peer
from keyload.settings import Settings, read_settings
from keyload.storage import dial_storage

log = get_logger("keyload.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keyload",
        description="Bulk-load key files into keyserver storage",
    )
    parser.add_argument("-config", "--config", dest="config", default=None,
                        help="settings file (YAML); defaults apply when omitted")
    parser.add_argument("-cpuprof", "--cpuprof", dest="cpuprof", action="store_true",
                        help="enable CPU profiling, toggled with SIGUSR2")
    parser.add_argument("-memprof", "--memprof", dest="memprof", action="store_true",
                        help="enable memory profile snapshots on SIGUSR2")
    parser.add_argument("files", nargs="*", metavar="file",
                        help="key file or glob pattern")
    return parser


def die(err: Optional[BaseException]) -> NoReturn:
    """Terminate the process, failing when ``err`` is set."""
    if err is not None:
        log.error(f"{type(err).__name__}: {err}")
        sys.exit(1)
    sys.exit(0)


def main(argv: Optional[List[str]] = None) -> NoReturn:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.files:
        log.error(f"usage: {parser.prog} [flags] <file1> [file2 .. fileN]")
        parser.print_usage(sys.stderr)
        die(UsageError("missing key file arguments"))

    try:
        settings = read_settings(args.config) if args.config else Settings()
    except (OSError, ParseError) as e:
        die(e)

    try:
        storage = dial_storage(settings.storage)
        peer = new_peer(storage, settings.recon)
    except (StorageConnectionError, PeerError) as e:
        die(e)

    state = ProfilingState(
        cpu_enabled=args.cpuprof,
        mem_enabled=args.memprof,
        cpu_prefix=settings.profiling.cpu_prefix,
        mem_path=settings.profiling.mem_path,
    )
    ProfilingToggle(state).start()

    load_patterns(storage, args.files)

    try:
        peer.write_stats()
    except StorageError as e:
        die(e)
    storage.close()
    die(None)


if __name__ == "__main__":
    main()
