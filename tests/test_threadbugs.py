import io

import pytest

from osdemos.threadbugs import (
    PR_STATE_INIT,
    PRThread,
    atomicity,
    create_thread,
    deadlock,
    main,
    ordering,
    wait_thread,
)


def test_create_and_wait_thread_runs_routine():
    ran = []
    handle = create_thread(lambda: ran.append("ran"), delay=0)
    assert isinstance(handle, PRThread)
    assert handle.state == PR_STATE_INIT
    wait_thread(handle)
    assert ran == ["ran"]
    assert handle.thread.is_alive() is False


def test_atomicity_bug_loses_pointer():
    out = io.StringIO()
    result = atomicity(fixed=False, check_delay=0.3, clear_delay=0.05, out=out)
    assert result is None
    text = out.getvalue()
    assert "t1: use!" in text
    assert "100\n" not in text


def test_atomicity_fixed_uses_pointer():
    out = io.StringIO()
    result = atomicity(fixed=True, check_delay=0.3, clear_delay=0.05, out=out)
    assert result == 100
    lines = out.getvalue().splitlines()
    assert lines.index("100") < [l.strip() for l in lines].index("t2: set to NULL")


def test_atomicity_bug_harmless_when_clear_is_late():
    result = atomicity(fixed=False, check_delay=0.02, clear_delay=0.2, out=io.StringIO())
    assert result == 100


def test_deadlock_with_timeout_terminates_consistently():
    out = io.StringIO()
    result = deadlock(out, timeout=0.3)
    text = out.getvalue()
    lines = text.splitlines()
    assert lines[0] == "main: begin"
    assert lines[-1] == "main: end"
    both = "t1: L2 acquired" in text and "t2: L1 acquired" in text
    assert result == both
    assert result == ("gave up" not in text)


def test_ordering_bug_sees_unset_handle():
    out = io.StringIO()
    assert ordering(fixed=False, delay=0.1, out=out) is None
    assert "mMain: state is" not in out.getvalue()


def test_ordering_fixed_reads_initial_state():
    out = io.StringIO()
    assert ordering(fixed=True, delay=0.05, out=out) == PR_STATE_INIT
    assert out.getvalue().splitlines() == [
        "ordering: begin",
        "mMain: begin",
        "mMain: state is 0",
        "ordering: end",
    ]


def test_main_rejects_unknown_demo():
    with pytest.raises(SystemExit) as exc:
        main(["nonsense"])
    assert exc.value.code == 2