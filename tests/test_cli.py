"""
Command-line driver tests — drives ``dreamer.main(argv)`` directly.
"""

import json

import pytest

import dreamer
from dreamer_vm import __version__
from dreamer_vm.asm import assemble

ADD_PROGRAM = assemble("SET 5\nPUSH\nSET 3\nPUSH\nADD\nHALT")


@pytest.fixture
def program_file(tmp_path):
    path = tmp_path / "add.bin"
    path.write_bytes(ADD_PROGRAM)
    return path


class TestRun:
    def test_run_prints_final_state(self, program_file, capsys):
        assert dreamer.main(["run", str(program_file)]) == 0
        out = capsys.readouterr().out
        assert out.strip() == "pc=5 reg=3 stack=[8] memory={}"

    def test_run_json(self, program_file, capsys):
        assert dreamer.main(["run", str(program_file), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == {"program_counter": 5, "register": 3, "stack": [8], "memory": {}}

    def test_run_output_file(self, program_file, tmp_path, capsys):
        out_path = tmp_path / "state.txt"
        assert dreamer.main(["run", str(program_file), "-o", str(out_path)]) == 0
        assert out_path.read_text(encoding="utf-8").strip() == "pc=5 reg=3 stack=[8] memory={}"
        assert capsys.readouterr().out == ""

    def test_trace(self, program_file, capsys):
        assert dreamer.main(["run", str(program_file), "--trace"]) == 0
        lines = capsys.readouterr().out.strip().split("\n")
        # initial state + 6 steps + final state
        assert len(lines) == 8
        assert lines[0] == "pc=0 reg=0 stack=[] memory={}"
        assert lines[1] == "[SET(5)] pc=1 reg=5 stack=[] memory={}"
        assert lines[5] == "[ADD] pc=5 reg=3 stack=[8] memory={}"
        assert lines[6] == "[HALT] pc=5 reg=3 stack=[8] memory={}"

    def test_missing_file(self, tmp_path, capsys):
        assert dreamer.main(["run", str(tmp_path / "nope.bin")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_decode_error(self, tmp_path, capsys):
        path = tmp_path / "bad.bin"
        path.write_bytes(b'\x06\x00\x00\x00\x01')
        assert dreamer.main(["run", str(path)]) == 1
        err = capsys.readouterr().err
        assert "Decode error" in err
        assert "offset 0" in err

    def test_execution_error_reports_last_state(self, tmp_path, capsys):
        path = tmp_path / "pop.bin"
        path.write_bytes(assemble("SET 1\nPOP"))
        assert dreamer.main(["run", str(path)]) == 2
        captured = capsys.readouterr()
        assert "Execution error: stack empty" in captured.err
        assert captured.out.strip() == "pc=1 reg=1 stack=[] memory={}"

    def test_unwritable_output(self, program_file, tmp_path, capsys):
        out_path = tmp_path / "nodir" / "out.txt"
        assert dreamer.main(["run", str(program_file), "-o", str(out_path)]) == 1
        assert "Error:" in capsys.readouterr().err
        assert not out_path.exists()

    def test_unwritable_output_after_execution_error(self, tmp_path, capsys):
        path = tmp_path / "pop.bin"
        path.write_bytes(assemble("POP"))
        out_path = tmp_path / "nodir" / "state.txt"
        assert dreamer.main(["run", str(path), "-o", str(out_path)]) == 1
        err = capsys.readouterr().err
        assert "Execution error" in err
        assert "Error:" in err

    def test_verbose_flag_accepted(self, program_file, capsys):
        assert dreamer.main(["-vv", "run", str(program_file)]) == 0
        assert "stack=[8]" in capsys.readouterr().out


class TestAsmDisasm:
    def test_asm_writes_binary(self, tmp_path):
        src = tmp_path / "add.s"
        src.write_text("SET 5\nPUSH\nSET 3\nPUSH\nADD\nHALT\n", encoding="utf-8")
        out = tmp_path / "add.bin"
        assert dreamer.main(["asm", str(src), "-o", str(out)]) == 0
        assert out.read_bytes() == ADD_PROGRAM

    def test_asm_error(self, tmp_path, capsys):
        src = tmp_path / "bad.s"
        src.write_text("BOGUS\n", encoding="utf-8")
        assert dreamer.main(["asm", str(src), "-o", str(tmp_path / "x.bin")]) == 1
        assert "Assembler error" in capsys.readouterr().err

    def test_asm_unwritable_output(self, tmp_path, capsys):
        src = tmp_path / "halt.s"
        src.write_text("HALT\n", encoding="utf-8")
        out = tmp_path / "nodir" / "halt.bin"
        assert dreamer.main(["asm", str(src), "-o", str(out)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_disasm(self, program_file, capsys):
        assert dreamer.main(["disasm", str(program_file)]) == 0
        out = capsys.readouterr().out
        assert "ADD" in out
        assert "HALT" in out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            dreamer.main(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert dreamer.main([]) == 0
        assert "usage: dreamer" in capsys.readouterr().out
