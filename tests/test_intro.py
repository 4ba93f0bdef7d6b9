import io as textio
import os

import pytest

from osdemos.intro import address_layout, cpu, io, main, mem, threads_counter


def test_io_writes_greeting(tmp_path):
    target = tmp_path / "file"
    written = io(target)
    assert target.read_bytes() == b"hello world\n"
    assert written == len(b"hello world\n")


def test_io_truncates_existing_file(tmp_path):
    target = tmp_path / "file"
    target.write_text("a much longer piece of old content\n")
    io(target)
    assert target.read_text() == "hello world\n"


def test_threads_counter_zero_loops():
    assert threads_counter(0) == 0


def test_threads_counter_bounded():
    result = threads_counter(1000)
    assert 0 < result <= 2000


def test_cpu_zero_iterations_prints_nothing():
    out = textio.StringIO()
    cpu("A", out, iterations=0)
    assert out.getvalue() == ""


def test_cpu_prints_text_each_iteration():
    out = textio.StringIO()
    cpu("A", out, iterations=1)
    assert out.getvalue() == "A\n"


def test_mem_increments_value():
    out = textio.StringIO()
    final = mem(5, out, iterations=1)
    lines = out.getvalue().splitlines()
    assert final == 6
    assert lines[0].startswith(f"({os.getpid()}) addr pointed to by p: 0x")
    assert lines[1] == f"({os.getpid()}) value of p: 6"


def test_address_layout_reports_three_locations():
    out = textio.StringIO()
    layout = address_layout(out)
    lines = out.getvalue().splitlines()
    assert sorted(layout) == ["code", "heap", "stack"]
    assert lines[0] == f"location of code : {layout['code']:#x}"
    assert lines[1] == f"location of heap : {layout['heap']:#x}"
    assert lines[2] == f"location of stack: {layout['stack']:#x}"


@pytest.mark.parametrize("argv", [[], ["cpu"], ["mem", "1", "2"], ["threads"], ["nope"]])
def test_main_usage_errors(argv):
    with pytest.raises(SystemExit) as info:
        main(argv)
    assert info.value.code == 1


def test_main_threads_prints_values(capsys):
    assert main(["threads", "10"]) == 0
    captured = capsys.readouterr().out.splitlines()
    assert captured[0] == "Initial value : 0"
    assert captured[1].startswith("Final value   : ")