# SPDX-License-Identifier: Apache-2.0
#
# Copyright 2017-2025 - Armijn Hemel

import os

from strace_ccdb.errors import MalformedInvocation

# Flags that do not matter when rebuilding a single translation unit,
# mapped to the number of values that follow them.
IGNORED_FLAGS = {
    # dependency generation
    '-MD': 0,
    '-MMD': 0,
    '-MG': 0,
    '-MP': 0,
    '-MF': 1,
    '-MT': 1,
    '-MQ': 1,

    # linker options
    '-static': 0,
    '-shared': 0,
    '-s': 0,
    '-rdynamic': 0,
    '-l': 1,
    '-L': 1,
    '-u': 1,
    '-z': 1,
    '-T': 1,
    '-Xlinker': 1,

    # re-added when the compile command is written
    '-c': 0,

    # recorded separately as the output of the entry
    '-o': 1,
}

# preprocessor flags that are kept together with their value
PREPROCESSOR_FLAGS = ['-D', '-I']

SOURCE_EXTENSIONS = frozenset([
    'c', 'i', 'ii', 'm', 'mm', 'mii',
    'C', 'cc', 'CC', 'cp', 'cpp', 'cxx', 'c++', 'C++', 't++', 'txx',
])


def is_source_file(arg):
    if arg.startswith('-'):
        return False
    extension = os.path.splitext(arg)[1][1:]
    return extension in SOURCE_EXTENSIONS


def scan_args(args):
    '''Walk the arguments once with an explicit cursor. Returns a tuple
       with the filtered arguments, the source file and the value of the
       last -o flag (both None if absent). The first argument (the
       program name) is always kept.'''
    if not args:
        return ([], None, None)

    filtered = [args[0]]
    source_file = None
    output = None

    idx = 1
    while idx < len(args):
        arg = args[idx]
        if arg in IGNORED_FLAGS:
            arity = IGNORED_FLAGS[arg]
            if idx + arity >= len(args):
                raise MalformedInvocation(args, arg)
            if arg == '-o':
                output = args[idx + 1]
            idx += 1 + arity
            continue

        if arg in PREPROCESSOR_FLAGS:
            if idx + 1 >= len(args):
                raise MalformedInvocation(args, arg)
            filtered += args[idx:idx + 2]
            idx += 2
            continue

        if is_source_file(arg):
            arg = arg.removeprefix('./')
            source_file = arg
        filtered.append(arg)
        idx += 1

    return (filtered, source_file, output)


def filter_args(args):
    '''Remove flags that are irrelevant for compiling a single file and
       find the primary source file. Returns a tuple with the filtered
       arguments and the source file (None if there is no source file).'''
    filtered, source_file, _ = scan_args(args)
    return (filtered, source_file)


def output_file(args):
    '''Return the value of the last -o flag, or None'''
    return scan_args(args)[2]
