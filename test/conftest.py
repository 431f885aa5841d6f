"""Pytest configuration and shared fixtures for strace-ccdb tests."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def tracefiles(tmp_path):
    """A directory with trace files as written by strace -ff for `make`."""
    trace_dir = tmp_path / 'traces'
    trace_dir.mkdir()

    (trace_dir / 'trace.100').write_text(
        'execve("/usr/bin/make", ["make"], ["PWD=/proj"]) = 0\n'
        '--- SIGCHLD {si_signo=SIGCHLD, si_code=CLD_EXITED, si_pid=101} ---\n'
        '+++ exited with 0 +++\n')
    (trace_dir / 'trace.101').write_text(
        'execve("/usr/bin/gcc", ["gcc", "-c", "-o", "main.o", "main.c"], ["PWD=/proj"]) = 0\n'
        '+++ exited with 0 +++\n')
    (trace_dir / 'trace.102').write_text(
        'execve("/usr/bin/clang++", ["clang++", "-MD", "-MF", "util.d", "-Iinclude", "-c", "./util.cpp"], ["PWD=/proj/lib", "LANG=C"]) = 0\n'
        '+++ exited with 0 +++\n')
    (trace_dir / 'trace.103').write_text(
        'execve("/usr/bin/gcc", ["gcc", "-o", "app", "main.o", "util.o", "-lm"], ["PWD=/proj"]) = 0\n'
        '+++ exited with 0 +++\n')
    (trace_dir / 'trace.104').write_text(
        'execve("/usr/bin/ar", ["ar", "rcs", "libutil.a", "util.o"], ["PWD=/proj"]) = 0\n'
        '+++ exited with 0 +++\n')
    return trace_dir
