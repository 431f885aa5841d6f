# SPDX-License-Identifier: Apache-2.0
#
# Copyright 2017-2025 - Armijn Hemel

'''Running a build command under strace. strace writes one trace file
per process, named after the output file with the PID as suffix.'''

import pathlib
import shutil
import subprocess
import sys

from strace_ccdb.errors import StraceError

STRACE_VERSION_PREFIX = 'strace -- version'

# base name of the trace files, strace appends .<pid>
TRACE_FILE_NAME = 'trace'


def strace_arguments(output_file):
    return [
        '-o', str(output_file), # output to $output_file.$pid
        '-ff',                  # follow forks
        '-e', 'trace=execve',   # only trace execve calls
        '-s', '8192',           # set max string length
        '-v',                   # request unabridged output
    ]


def locate_strace(strace_command='strace'):
    '''Find strace and check that it actually is strace'''
    strace_path = shutil.which(strace_command)
    if strace_path is None:
        raise StraceError(f"{strace_command} could not be found")

    try:
        result = subprocess.run([strace_path, '-V'], capture_output=True, text=True)
    except OSError as e:
        raise StraceError(f"could not run {strace_path}") from e

    if result.returncode != 0 or not result.stdout.startswith(STRACE_VERSION_PREFIX):
        raise StraceError(f"{strace_path} does not look like strace")
    return strace_path


def run_strace(strace_path, build_command, trace_directory):
    '''Run the build command under strace, writing trace files into
       trace_directory. Returns the exit code of strace, which is the
       exit code of the build.'''
    output_file = pathlib.Path(trace_directory) / TRACE_FILE_NAME
    run_command = [strace_path] + strace_arguments(output_file) + list(build_command)

    sys.stdout.flush()
    sys.stderr.flush()

    proc = subprocess.run(run_command)
    return proc.returncode


def trace_files(trace_directory):
    '''All trace files written into a pristine trace directory'''
    tracefiles = []
    for path in pathlib.Path(trace_directory).iterdir():
        if not path.is_file():
            raise StraceError(f"unexpected non-file entry {path} in {trace_directory}")
        tracefiles.append(path)
    return sorted(tracefiles)
