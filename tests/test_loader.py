"""Tests for intcode.loader — program text parsing and VM construction."""

import pytest

from intcode.errors import ParseError
from intcode.loader import load_from_file, load_from_str, load_program, parse_program
from intcode.vm import IntcodeVM


class TestParseProgram:
    def test_simple_list(self):
        assert parse_program("12,14") == [12, 14]

    def test_signed_values(self):
        assert parse_program("-1,+2,0") == [-1, 2, 0]

    def test_surrounding_whitespace_ignored(self):
        assert parse_program("  1, 2 ,3\n") == [1, 2, 3]

    def test_large_values(self):
        assert parse_program("104,1125899906842624,99") == [104, 1125899906842624, 99]

    def test_non_integer_token_raises(self):
        with pytest.raises(ParseError, match="'x' at index 1") as ex:
            parse_program("1,x,3")
        assert ex.value.token == "x"
        assert ex.value.index == 1

    def test_trailing_comma_raises(self):
        with pytest.raises(ParseError):
            parse_program("1,2,")

    def test_empty_text_raises(self):
        with pytest.raises(ParseError):
            parse_program("")

    @pytest.mark.parametrize("token", ["1.5", "0x10", "1_000", "1e3"])
    def test_non_decimal_syntax_raises(self, token):
        with pytest.raises(ParseError):
            parse_program(f"1,{token}")

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_program("a")


class TestLoadFromStr:
    def test_returns_vm(self):
        vm = load_from_str("1,0,0,0,99")
        assert isinstance(vm, IntcodeVM)
        vm.run()
        assert vm.memory.snapshot() == (2, 0, 0, 0, 99)

    def test_passes_vm_kwargs(self):
        vm = load_from_str("3,0,4,0,99", input=[33])
        assert vm.run() == (33,)


class TestLoadFromFile:
    def test_load_program(self, tmp_path):
        path = tmp_path / "program.txt"
        path.write_text("1,9,10,3,2,3,11,0,99,30,40,50\n")
        assert load_program(path) == [1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50]

    def test_load_from_file_runs(self, tmp_path):
        path = tmp_path / "program.txt"
        path.write_text("1,9,10,3,2,3,11,0,99,30,40,50\n")
        vm = load_from_file(str(path))
        vm.run()
        assert vm.memory[0] == 3500

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_program(tmp_path / "missing.txt")
