import io
import os
import stat

import pytest

from osdemos.processes import fork_exec, fork_hello, fork_redirect, fork_wait, main


def test_fork_hello_reports_both_pids():
    out = io.StringIO()
    pid = fork_hello(out)
    text = out.getvalue()
    assert text.startswith(f"hello world (pid:{os.getpid()})\n")
    assert f"hello, I am child (pid:{pid})" in text
    assert f"hello, I am parent of {pid} (pid:{os.getpid()})" in text
    assert pid > 0


def test_fork_wait_child_first():
    out = io.StringIO()
    pid = fork_wait(out)
    lines = out.getvalue().splitlines()
    assert lines[1] == f"hello, I am child (pid:{pid})"
    assert lines[2] == f"hello, I am parent of {pid} (wc:{pid}) (pid:{os.getpid()})"


def test_fork_exec_runs_word_count(tmp_path):
    content = "one two\nthree\n"
    target = tmp_path / "sample.txt"
    target.write_text(content)
    out = io.StringIO()
    pid = fork_exec(target, out)
    lines = out.getvalue().splitlines()
    assert lines[1] == f"hello, I am child (pid:{pid})"
    wc_fields = lines[2].split()
    assert wc_fields[-1] == str(target)
    assert int(wc_fields[2]) == len(content.encode())
    assert "this shouldn't print out" not in out.getvalue()
    assert lines[-1].startswith(f"hello, I am parent of {pid} (wc:{pid})")


def test_main_rejects_unknown_command():
    with pytest.raises(SystemExit) as info:
        main(["bogus"])
    assert info.value.code == 1


def test_main_rejects_too_many_arguments():
    with pytest.raises(SystemExit) as info:
        main(["hello", "extra"])
    assert info.value.code == 1