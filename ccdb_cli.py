#!/usr/bin/env python3

# Compilation database generator
#
# Runs a build under strace, following all processes and recording
# every execve() call, and reconstructs compile_commands.json from the
# compiler invocations found in the traces.
#
# Background information:
#
# * https://clang.llvm.org/docs/JSONCompilationDatabase.html
#
# SPDX-License-Identifier: Apache-2.0
#
# Copyright 2017-2025 - Armijn Hemel

import datetime
import json
import pathlib
import sys
import tempfile

import click

from strace_ccdb import compdb
from strace_ccdb import pipeline
from strace_ccdb import strace
from strace_ccdb.errors import CompileDBError, ParseError


def log_phase(message):
    now = datetime.datetime.now(datetime.UTC).isoformat()
    print(f"{now} - {message}", file=sys.stderr)


def report_parse_error(error):
    print(f"Warning: skipping line: {error.line}", file=sys.stderr)


def write_database(tracefiles, output, strict, debug):
    '''Process trace files and write the compilation database'''
    stats = pipeline.ProcessStats()
    if debug:
        log_phase(f"Started processing {len(tracefiles)} trace files")

    try:
        pairs = list(pipeline.process_tracefiles(tracefiles, stats=stats, strict=strict,
                                                 on_error=report_parse_error if debug else None,
                                                 debug=debug))
    except ParseError as e:
        raise click.ClickException(str(e)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Could not read trace files: {e}") from e

    if debug:
        log_phase("Finished processing trace files")
        print(json.dumps(stats.as_dict(), indent=4), file=sys.stderr)

    if stats.parse_errors and not debug:
        print(f"Warning: skipped {stats.parse_errors} unparseable trace lines",
              file=sys.stderr)

    try:
        entries = compdb.build_entries(pairs)
        compdb.write_compile_commands(entries, output)
    except CompileDBError as e:
        raise click.ClickException(str(e)) from e

    if debug:
        log_phase(f"Wrote {len(entries)} entries to {output}")


@click.group()
def app():
    pass


@app.command(short_help='Run a build under strace and write compile_commands.json',
             context_settings={'ignore_unknown_options': True})
@click.option('--output', '-o', 'output', default=compdb.COMPILE_COMMANDS_JSON,
              help='name of the compilation database', show_default=True,
              type=click.Path(dir_okay=False, path_type=pathlib.Path))
@click.option('--strace', 'strace_command', default='strace', envvar='STRACE_CCDB_STRACE',
              help='strace executable', show_default=True)
@click.option('--strict', is_flag=True, help='stop at the first unparseable trace line')
@click.option('--debug', '-d', is_flag=True, help='print debug information')
@click.argument('build_command', nargs=-1, required=True, type=click.UNPROCESSED)
def trace(output, strace_command, strict, build_command, debug):
    '''Trace BUILD_COMMAND and reconstruct the compilation database'''
    try:
        strace_path = strace.locate_strace(strace_command)
    except CompileDBError as e:
        raise click.ClickException(str(e)) from e

    if debug:
        print("STRACE", strace_path, file=sys.stderr)

    with tempfile.TemporaryDirectory(prefix='strace-ccdb-') as trace_directory:
        returncode = strace.run_strace(strace_path, build_command, trace_directory)
        if returncode != 0:
            print(f"Build command exited with {returncode}", file=sys.stderr)
            sys.exit(returncode)

        try:
            tracefiles = strace.trace_files(trace_directory)
        except CompileDBError as e:
            raise click.ClickException(str(e)) from e

        write_database(tracefiles, output, strict, debug)


@app.command(short_help='Process existing strace output')
@click.option('--tracefiles', '-f', 'tracefiles', required=True,
              help='path to trace files directory', type=click.Path(path_type=pathlib.Path))
@click.option('--output', '-o', 'output', default=compdb.COMPILE_COMMANDS_JSON,
              help='name of the compilation database', show_default=True,
              type=click.Path(dir_okay=False, path_type=pathlib.Path))
@click.option('--strict', is_flag=True, help='stop at the first unparseable trace line')
@click.option('--debug', '-d', is_flag=True, help='print debug information')
def process_trace(tracefiles, output, strict, debug):
    '''Write a compilation database from a directory with trace files'''
    # a directory with all the tracefiles
    if not (tracefiles.exists() and tracefiles.is_dir()):
        raise click.ClickException(f"{tracefiles} does not exist or is not a directory")

    files = sorted(path for path in tracefiles.glob('**/*') if path.is_file())
    write_database(files, output, strict, debug)


@app.command(short_help='Compare two compilation databases')
@click.argument('reference', type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path))
@click.argument('test', type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path))
def compare(reference, test):
    '''Check that REFERENCE and TEST contain the same entries, in any order'''
    try:
        reference_entries = compdb.load_compile_commands(reference)
        test_entries = compdb.load_compile_commands(test)
    except CompileDBError as e:
        raise click.ClickException(str(e)) from e

    result = compdb.compare_databases(reference_entries, test_entries)

    print(f"reference commands: {result.reference_count}")
    print(f"test commands: {result.test_count}")

    if result.equal:
        print("compilation databases are equal")
        return

    for entry in result.missing:
        print(f"missing cmd {json.dumps(entry, indent=4)}", file=sys.stderr)
    for entry in result.extra:
        print(f"extra cmd {json.dumps(entry, indent=4)}", file=sys.stderr)

    if result.missing:
        print(f"{len(result.missing)} commands from reference input are missing from test input",
              file=sys.stderr)
    if result.extra:
        print(f"{len(result.extra)} commands in test input are not in the reference input",
              file=sys.stderr)
    if result.count_mismatch:
        print("reference and test inputs differ in number of commands", file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
    app()
