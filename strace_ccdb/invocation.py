# SPDX-License-Identifier: Apache-2.0
#
# Copyright 2017-2025 - Armijn Hemel

# environment variable holding the working directory of a process
WORKING_DIRECTORY_VARIABLE = 'PWD'


class Invocation:
    '''Helper class to store information about a single execve() call
       as recorded by strace.'''
    def __init__(self, path, args, env, retcode):
        # The path of the executable, as passed to execve()
        self._path = path

        # The argument vector. The first element is the name
        # the program was invoked as.
        self._args = list(args)

        # The environment as a list of (key, value) pairs, in
        # the order in which they were recorded.
        self._env = list(env)

        self._retcode = retcode

    @property
    def path(self):
        return self._path

    @property
    def args(self):
        return self._args

    @property
    def env(self):
        return self._env

    @property
    def retcode(self):
        return self._retcode

    @property
    def working_directory(self):
        for key, value in self._env:
            if key == WORKING_DIRECTORY_VARIABLE:
                return value
        return None

    def __eq__(self, other):
        if not isinstance(other, Invocation):
            return NotImplemented
        return (self.path, self.args, self.env, self.retcode) == \
               (other.path, other.args, other.env, other.retcode)

    def __repr__(self):
        return f"Invocation(path={self.path!r}, args={self.args!r}, env={self.env!r}, retcode={self.retcode!r})"
