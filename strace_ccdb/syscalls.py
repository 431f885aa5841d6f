# SPDX-License-Identifier: Apache-2.0
#
# Copyright 2017-2025 - Armijn Hemel

import re

# Building blocks for the lines written by:
#
#   strace -ff -e trace=execve -s 8192 -v
#
# Quoted strings cannot contain a double quote: strace escapes these as \"
# and escape sequences are not interpreted here.
STRING = r'"[^"]*"'
ARRAY = rf'\[(?:{STRING}(?:, {STRING})*)?\]'
RETURNCODE = r'[0-9]+'

# elements of an array, applied to an already matched array
array_element_re = re.compile(r'"(?P<value>[^"]*)"')

# execve
# Example: execve("/usr/bin/gcc", ["gcc", "-c", "main.c"], ["PWD=/proj"]) = 0
execve_re = re.compile(rf"execve\((?P<path>{STRING}), (?P<args>{ARRAY}), (?P<env>{ARRAY})\) = (?P<returncode>{RETURNCODE})")

# process exit
# Example: +++ exited with 0 +++
exited_re = re.compile(rf"\+\+\+ exited with (?P<returncode>{RETURNCODE}) \+\+\+")
