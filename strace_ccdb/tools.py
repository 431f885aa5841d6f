# SPDX-License-Identifier: Apache-2.0
#
# Copyright 2017-2025 - Armijn Hemel

import enum
import os
import re

from dataclasses import dataclass


class Action(enum.Enum):
    '''What a compiler was asked to do'''
    COMPILE = 'compile'
    EMIT_ASM = 'emit-asm'
    LINK = 'link'
    OTHER = 'other'


class Tool(enum.Enum):
    C_COMPILER = 'c-compiler'
    CXX_COMPILER = 'c++-compiler'
    COMPILER_WRAPPER = 'compiler-wrapper'
    LINKER = 'linker'
    ARCHIVER = 'archiver'
    UNKNOWN = 'unknown'


COMPILERS = (Tool.C_COMPILER, Tool.CXX_COMPILER)


@dataclass(eq=True, frozen=True)
class ToolKind:
    '''Classification of an invocation. Only compilers carry an action.'''
    tool: Tool
    action: Action = None

    def __post_init__(self):
        if (self.tool in COMPILERS) != (self.action is not None):
            raise ValueError(f"{self.tool} cannot have action {self.action}")

    @property
    def is_compiler(self):
        return self.tool in COMPILERS

    @property
    def is_compile(self):
        return self.is_compiler and self.action == Action.COMPILE

    @classmethod
    def c_compiler(cls, action):
        return cls(Tool.C_COMPILER, action)

    @classmethod
    def cxx_compiler(cls, action):
        return cls(Tool.CXX_COMPILER, action)


# arguments that turn a compiler invocation into a link step
linking_arg_re = re.compile(r"-(l|L|Wl,).+")

# compiler and wrapper names, the same patterns as used by intercept-build
c_compiler_res = [
    re.compile(r"i?cc"),
    re.compile(r"([^-]*-)*[mg]cc(-?\d+(\.\d+){0,2})?"),
    re.compile(r"g?xlc"),
    re.compile(r"([^-]*-)*clang(-\d+(\.\d+){0,2})?"),
]

cxx_compiler_res = [
    re.compile(r"(c\+\+|cxx|CC)"),
    re.compile(r"([^-]*-)*[mg]\+\+(-\d+(\.\d+){0,2})?"),
    re.compile(r"([^-]*-)*clang\+\+(-\d+(\.\d+){0,2})?"),
    re.compile(r"icpc"),
    re.compile(r"g?xl(C|c\+\+)"),
]

linker_re = re.compile(r"ld(\.(bfd|gold))?")

compiler_wrapper_res = [
    re.compile(r"(distcc|ccache)"),
    re.compile(r"mpi(cc|cxx|CC|c\+\+)"),
]


def compiler_action(args):
    '''Determine the action of a compiler from its arguments. A linking
       argument anywhere makes it a link step, otherwise the first of
       -S and -c decides.'''
    if any(linking_arg_re.match(arg) for arg in args):
        return Action.LINK
    for arg in args:
        if arg == '-S':
            return Action.EMIT_ASM
        if arg == '-c':
            return Action.COMPILE
    return Action.OTHER


def _matches(patterns, name):
    return any(pattern.fullmatch(name) for pattern in patterns)


def classify(invocation):
    '''Classify an invocation by the name of its executable'''
    name = os.path.basename(invocation.path)

    if _matches(c_compiler_res, name):
        return ToolKind.c_compiler(compiler_action(invocation.args))
    if _matches(cxx_compiler_res, name):
        return ToolKind.cxx_compiler(compiler_action(invocation.args))
    if linker_re.fullmatch(name):
        return ToolKind(Tool.LINKER)
    if name == 'ar':
        return ToolKind(Tool.ARCHIVER)
    if _matches(compiler_wrapper_res, name):
        return ToolKind(Tool.COMPILER_WRAPPER)
    return ToolKind(Tool.UNKNOWN)
