# SPDX-License-Identifier: Apache-2.0
#
# Copyright 2017-2025 - Armijn Hemel


class CompileDBError(Exception):
    '''Base class for all errors raised while building a compilation database'''


class ParseError(CompileDBError):
    '''A trace line matched neither an execve record nor an exit footer'''
    def __init__(self, line):
        super().__init__(f"could not parse trace line: {line!r}")
        self.line = line


class MalformedInvocation(CompileDBError):
    '''A flag that takes a value was the last argument of an invocation'''
    def __init__(self, args, flag):
        super().__init__(f"flag {flag} without a value in {args!r}")
        self.arguments = args
        self.flag = flag


class MissingWorkingDirectory(CompileDBError):
    '''An admitted compiler invocation has no PWD in its environment'''
    def __init__(self, invocation):
        super().__init__(f"no working directory recorded for {invocation.path}")
        self.invocation = invocation


class WriteFailure(CompileDBError):
    '''The compilation database could not be serialized or written'''


class DatabaseLoadError(CompileDBError):
    '''A compilation database could not be read back'''


class StraceError(CompileDBError):
    '''strace could not be found or does not look like strace'''
