# SPDX-License-Identifier: Apache-2.0
#
# Copyright 2017-2025 - Armijn Hemel

'''Parser for the per-process trace files written by strace when only
execve() is traced. Every line in such a file is either an execve()
record or the footer that strace writes when the process exits:

    execve("/bin/ls", ["ls", "-la"], ["PWD=/tmp"]) = 0
    +++ exited with 0 +++

Any other line is reported as a ParseError.'''

from strace_ccdb import syscalls
from strace_ccdb.errors import ParseError
from strace_ccdb.invocation import Invocation

# return codes are stored as an unsigned byte
MAX_RETURNCODE = 255


def _parse_returncode(value, line):
    # leading zeros do not change the value, anything longer
    # than three digits after them cannot fit in a byte
    digits = value.lstrip('0') or '0'
    if len(digits) > len(str(MAX_RETURNCODE)):
        raise ParseError(line)
    returncode = int(digits)
    if returncode > MAX_RETURNCODE:
        raise ParseError(line)
    return returncode


def _parse_array(value):
    return [m.group('value') for m in syscalls.array_element_re.finditer(value)]


def _parse_env(value, line):
    env = []
    for element in _parse_array(value):
        if '=' not in element:
            raise ParseError(line)
        key, env_value = element.split('=', maxsplit=1)
        env.append((key, env_value))
    return env


def parseln(line):
    '''Parse a single trace line. Returns an Invocation for an execve()
       record, None for an exit footer and raises ParseError otherwise.'''
    line = line.rstrip('\n')

    execveres = syscalls.execve_re.fullmatch(line)
    if execveres:
        return Invocation(execveres.group('path')[1:-1],
                          _parse_array(execveres.group('args')),
                          _parse_env(execveres.group('env'), line),
                          _parse_returncode(execveres.group('returncode'), line))

    exitres = syscalls.exited_re.fullmatch(line)
    if exitres:
        _parse_returncode(exitres.group('returncode'), line)
        return None

    raise ParseError(line)


def _format_array(values):
    return '[' + ', '.join(f'"{value}"' for value in values) + ']'


def formatln(invocation):
    '''Write an Invocation back in the format that parseln() reads'''
    env = [f"{key}={value}" for key, value in invocation.env]
    return f'execve("{invocation.path}", {_format_array(invocation.args)}, {_format_array(env)}) = {invocation.retcode}'
