# SPDX-License-Identifier: Apache-2.0
#
# Copyright 2017-2025 - Armijn Hemel

'''Compilation database (compile_commands.json) writing, reading and
comparison. Only the "arguments" form of an entry is ever written.'''

import collections
import json
import os
import pathlib

from dataclasses import dataclass

from strace_ccdb.argfilter import scan_args
from strace_ccdb.errors import DatabaseLoadError, MissingWorkingDirectory, WriteFailure
from strace_ccdb.tools import Tool

COMPILE_COMMANDS_JSON = 'compile_commands.json'

# keys of an entry that hold a single string
STRING_KEYS = ['directory', 'file', 'command', 'output']

# the program name written as the first argument
COMPILER_LABELS = {
    Tool.C_COMPILER: 'cc',
    Tool.CXX_COMPILER: 'c++',
}


@dataclass(eq=True, frozen=True)
class CompileEntry:
    directory: str
    file: str
    arguments: tuple
    output: str = None

    @classmethod
    def from_invocation(cls, invocation, toolkind):
        '''Create an entry for a compiler invocation that compiles a
           single source file.'''
        if not toolkind.is_compile:
            raise ValueError(f"{invocation.path} is not a compile step: {toolkind}")

        directory = invocation.working_directory
        if directory is None:
            raise MissingWorkingDirectory(invocation)

        arguments, source_file, output = scan_args(invocation.args)
        if source_file is None:
            raise ValueError(f"no source file in {invocation.args!r}")

        arguments = [COMPILER_LABELS[toolkind.tool], '-c'] + arguments[1:]
        return cls(directory, source_file, tuple(arguments), output)

    def to_json_dict(self):
        result = {'directory': self.directory, 'file': self.file,
                  'arguments': list(self.arguments)}
        if self.output is not None:
            result['output'] = self.output
        return result


def build_entries(pairs):
    '''Turn admitted (Invocation, ToolKind) pairs into entries,
       keeping the order in which they were encountered.'''
    return [CompileEntry.from_invocation(invocation, toolkind) for invocation, toolkind in pairs]


def write_compile_commands(entries, path=COMPILE_COMMANDS_JSON):
    '''Write all entries as one pretty printed JSON array. The document
       is written to a temporary file next to the destination first and
       then renamed, so an existing database is either replaced entirely
       or left alone.'''
    path = pathlib.Path(path)
    try:
        document = json.dumps([entry.to_json_dict() for entry in entries], indent=4)
    except (TypeError, ValueError) as e:
        raise WriteFailure(f"could not serialize compilation database: {e}") from e

    tmp_path = path.with_name(f"{path.name}.{os.getpid()}")
    try:
        with open(tmp_path, 'w', encoding='utf-8') as outfile:
            outfile.write(document)
            outfile.write('\n')
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise WriteFailure(f"could not write {path}: {e}") from e
    return path


def load_compile_commands(path):
    '''Read a compilation database, returns a list of dicts'''
    try:
        with open(path, 'r', encoding='utf-8') as infile:
            data = json.load(infile)
    except OSError as e:
        raise DatabaseLoadError(f"could not read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DatabaseLoadError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise DatabaseLoadError(f"{path} does not contain a JSON array")
    for entry in data:
        if not isinstance(entry, dict):
            raise DatabaseLoadError(f"{path} contains an entry that is not an object: {entry!r}")
        for key in STRING_KEYS:
            if entry.get(key) is not None and not isinstance(entry[key], str):
                raise DatabaseLoadError(f"{path}: \"{key}\" is not a string in {entry!r}")
        arguments = entry.get('arguments', [])
        if not (isinstance(arguments, list) and all(isinstance(arg, str) for arg in arguments)):
            raise DatabaseLoadError(f"{path}: \"arguments\" is not a list of strings in {entry!r}")
    return data


def entry_key(entry):
    '''Identity of a database entry (a dict as read from JSON)'''
    arguments = entry.get('arguments')
    if arguments is not None:
        arguments = tuple(arguments)
    return (entry.get('directory'), entry.get('file'), arguments,
            entry.get('command'), entry.get('output'))


class Comparison:
    '''Result of comparing a reference database with a test database'''
    def __init__(self, reference_count, test_count, missing, extra):
        self._reference_count = reference_count
        self._test_count = test_count

        # entries in the reference that are not in the test database
        self._missing = missing

        # entries in the test database that are not in the reference
        self._extra = extra

    @property
    def reference_count(self):
        return self._reference_count

    @property
    def test_count(self):
        return self._test_count

    @property
    def missing(self):
        return self._missing

    @property
    def extra(self):
        return self._extra

    @property
    def count_mismatch(self):
        return self._reference_count != self._test_count

    @property
    def equal(self):
        return not (self._missing or self._extra or self.count_mismatch)


def compare_databases(reference, test):
    '''Compare two databases (lists of entry dicts) as multisets,
       ignoring the order of the entries.'''
    reference = list(reference)
    test = list(test)

    reference_counter = collections.Counter(entry_key(entry) for entry in reference)
    test_counter = collections.Counter(entry_key(entry) for entry in test)

    # keep one example dict for every key to report
    examples = {}
    for entry in reference + test:
        examples.setdefault(entry_key(entry), entry)

    missing = []
    for key, count in (reference_counter - test_counter).items():
        missing += [examples[key]] * count

    extra = []
    for key, count in (test_counter - reference_counter).items():
        extra += [examples[key]] * count

    return Comparison(len(reference), len(test), missing, extra)
