# SPDX-License-Identifier: Apache-2.0
#
# Copyright 2017-2025 - Armijn Hemel

'''Turn strace output into compiler invocations that can be written
to a compilation database.'''

import sys

from strace_ccdb.argfilter import filter_args
from strace_ccdb.errors import MalformedInvocation, ParseError
from strace_ccdb.parser import parseln
from strace_ccdb.tools import classify

# compiler driver flags for invocations that do not compile anything
NOT_COMPILING = frozenset(['-E', '-cc1', '-cc1as', '-M', '-MM', '-###'])


class ProcessStats:
    '''Counters for a single run over trace lines'''
    def __init__(self):
        self.lines = 0
        self.footers = 0
        self.invocations = 0
        self.parse_errors = 0
        self.compiler_invocations = 0
        self.not_compiling = 0
        self.malformed = 0
        self.no_source = 0
        self.admitted = 0

    def as_dict(self):
        return dict(vars(self))


def _warn(message):
    print(f"Warning: {message}", file=sys.stderr)


def process_lines(lines, stats=None, strict=False, on_error=None, debug=False):
    '''Parse and classify trace lines, yielding (Invocation, ToolKind)
       pairs for every invocation that compiles a single source file.

       Lines that cannot be parsed are passed to on_error, or raise a
       ParseError if strict is set.'''
    if stats is None:
        stats = ProcessStats()

    for line in lines:
        stats.lines += 1
        try:
            invocation = parseln(line)
        except ParseError as e:
            stats.parse_errors += 1
            if strict:
                raise
            if on_error is not None:
                on_error(e)
            continue

        if invocation is None:
            stats.footers += 1
            continue
        stats.invocations += 1

        toolkind = classify(invocation)
        if debug:
            print(invocation.path, toolkind.tool.value, file=sys.stderr)

        if not toolkind.is_compiler:
            continue
        stats.compiler_invocations += 1

        if not toolkind.is_compile:
            continue

        if any(arg in NOT_COMPILING for arg in invocation.args):
            stats.not_compiling += 1
            continue

        try:
            _, source_file = filter_args(invocation.args)
        except MalformedInvocation as e:
            stats.malformed += 1
            _warn(f"ignoring malformed invocation: {e}")
            continue

        if source_file is None:
            stats.no_source += 1
            continue

        stats.admitted += 1
        yield (invocation, toolkind)


def process_tracefiles(tracefiles, stats=None, strict=False, on_error=None, debug=False):
    '''Process per-process trace files in a fixed (sorted) order'''
    if stats is None:
        stats = ProcessStats()

    for tracefile in sorted(tracefiles):
        if debug:
            print(f"processing {tracefile}", file=sys.stderr)
        with open(tracefile, 'r', encoding='utf-8') as file_to_process:
            yield from process_lines(file_to_process, stats=stats, strict=strict,
                                     on_error=on_error, debug=debug)
