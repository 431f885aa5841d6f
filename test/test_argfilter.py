"""Tests for filtering compiler arguments."""

import pytest

from strace_ccdb.argfilter import filter_args, is_source_file, output_file, scan_args
from strace_ccdb.errors import MalformedInvocation


class TestFilterArgs:
    """Tests for removing flags and finding the source file."""

    def test_dependency_flags_removed(self) -> None:
        """Test that -MF drops both the flag and its value."""
        args = ['cc', '-MD', '-MF', 'dep.d', '-Dfoo=1', '-Ifoo', 'main.c']
        assert filter_args(args) == (['cc', '-Dfoo=1', '-Ifoo', 'main.c'], 'main.c')

    def test_preprocessor_flags_keep_their_value(self) -> None:
        args = ['cc', '-D', 'NDEBUG', '-I', 'include', '-c', 'main.c']
        assert filter_args(args) == (['cc', '-D', 'NDEBUG', '-I', 'include', 'main.c'], 'main.c')

    def test_value_of_preprocessor_flag_is_not_a_source(self) -> None:
        arguments, source_file = filter_args(['cc', '-I', 'weird.c', '-c', 'main.c'])
        assert source_file == 'main.c'
        assert arguments == ['cc', '-I', 'weird.c', 'main.c']

    def test_linker_flags_removed(self) -> None:
        args = ['cc', '-shared', '-s', '-rdynamic', '-static', '-L', 'lib', '-l', 'm',
                '-u', 'sym', '-z', 'now', '-T', 'script.ld', '-Xlinker', '-q', 'main.c']
        assert filter_args(args) == (['cc', 'main.c'], 'main.c')

    def test_compile_and_output_flags_removed(self) -> None:
        args = ['gcc', '-c', '-o', 'main.o', 'main.c']
        assert filter_args(args) == (['gcc', 'main.c'], 'main.c')

    def test_leading_dot_slash_stripped(self) -> None:
        arguments, source_file = filter_args(['c++', '-O2', './main.cpp'])
        assert source_file == 'main.cpp'
        assert arguments == ['c++', '-O2', 'main.cpp']

    def test_last_source_wins(self) -> None:
        arguments, source_file = filter_args(['cc', 'a.c', 'b.cc'])
        assert source_file == 'b.cc'
        assert arguments == ['cc', 'a.c', 'b.cc']

    def test_no_source_file(self) -> None:
        assert filter_args(['cc', '-c', 'main.o', '-O2']) == (['cc', 'main.o', '-O2'], None)

    def test_program_name_kept(self) -> None:
        """Test that the first argument is never treated as a flag or a source file."""
        assert filter_args(['-c']) == (['-c'], None)
        assert filter_args([]) == ([], None)

    @pytest.mark.parametrize('flag', ['-MF', '-MT', '-MQ', '-l', '-L', '-u', '-z', '-T',
                                      '-Xlinker', '-o', '-D', '-I'])
    def test_missing_value_is_malformed(self, flag) -> None:
        with pytest.raises(MalformedInvocation) as excinfo:
            filter_args(['cc', 'main.c', flag])
        assert excinfo.value.flag == flag


class TestSourceFiles:

    @pytest.mark.parametrize('name', ['a.c', 'a.i', 'a.ii', 'a.m', 'a.mm', 'a.mii', 'a.C', 'a.cc',
                                      'a.CC', 'a.cp', 'a.cpp', 'a.cxx', 'a.c++', 'a.C++', 'a.t++',
                                      'a.txx', 'dir.d/a.c'])
    def test_source_extensions(self, name) -> None:
        assert is_source_file(name)

    @pytest.mark.parametrize('name', ['a.o', 'a.h', 'a.s', 'a.S', 'Makefile', '-x.c', '.c', 'a.c.o'])
    def test_not_source(self, name) -> None:
        assert not is_source_file(name)


class TestOutputFile:

    def test_output(self) -> None:
        assert output_file(['gcc', '-c', '-o', 'main.o', 'main.c']) == 'main.o'
        assert output_file(['gcc', '-c', 'main.c']) is None

    def test_output_without_value(self) -> None:
        with pytest.raises(MalformedInvocation):
            output_file(['gcc', '-c', 'main.c', '-o'])

    def test_value_of_other_flag_is_not_output(self) -> None:
        """Test that an -o consumed as the value of -MF is not the output."""
        args = ['gcc', '-c', '-MF', '-o', 'a.c']
        assert output_file(args) is None
        assert filter_args(args) == (['gcc', 'a.c'], 'a.c')

    def test_last_output_wins(self) -> None:
        assert scan_args(['gcc', '-o', 'a.o', '-c', 'a.c', '-o', 'b.o']) == (['gcc', 'a.c'], 'a.c', 'b.o')
