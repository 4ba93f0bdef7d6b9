import io
import threading

import pytest

from osdemos.philosophers import DiningTable, left, main, right, run


def test_fork_indices_wrap_around_table():
    assert [left(p) for p in range(5)] == [0, 1, 2, 3, 4]
    assert [right(p) for p in range(5)] == [1, 2, 3, 4, 0]


def test_run_without_deadlock_feeds_everyone():
    out = io.StringIO()
    meals = run(40, avoid_deadlock=True, out=out)
    assert meals == [40] * 5
    lines = out.getvalue().splitlines()
    assert lines[0] == "dining: started"
    assert lines[-1] == "dining: finished"


def test_run_with_no_meals_in_deadlock_mode():
    out = io.StringIO()
    assert run(0, avoid_deadlock=False, out=out) == [0] * 5
    assert out.getvalue() == "dining: started\ndining: finished\n"


def test_verbose_deadlock_mode_messages():
    out = io.StringIO()
    table = DiningTable(avoid_deadlock=False, verbose=True, out=out)
    table.get_forks(2)
    table.put_forks(2)
    assert out.getvalue().splitlines() == [" " * 20 + "2: try 2", " " * 20 + "2: try 3"]


def test_last_philosopher_takes_right_fork_first():
    out = io.StringIO()
    table = DiningTable(avoid_deadlock=True, verbose=True, out=out)
    table.get_forks(4)
    table.put_forks(4)
    table.get_forks(1)
    assert out.getvalue().splitlines() == [
        " " * 40 + "4 try 0",
        " " * 40 + "4 try 4",
        " " * 10 + "try 1",
        " " * 10 + "try 2",
    ]


def test_neighbour_blocks_until_fork_returned():
    out = io.StringIO()
    table = DiningTable(avoid_deadlock=False, verbose=True, out=out)
    table.get_forks(0)
    got = threading.Event()

    def neighbour():
        table.get_forks(1)
        got.set()

    thread = threading.Thread(target=neighbour, daemon=True)
    thread.start()
    assert not got.wait(0.2)
    assert out.getvalue().splitlines() == [
        "0: try 0",
        "0: try 1",
        " " * 10 + "1: try 1",
    ]
    table.put_forks(0)
    assert got.wait(2)
    thread.join(2)
    assert not thread.is_alive()
    assert out.getvalue().splitlines()[-1] == " " * 10 + "1: try 2"


def test_verbose_run_logs_each_phase():
    out = io.StringIO()
    run(2, avoid_deadlock=True, verbose=True, out=out)
    stripped = [line.strip() for line in out.getvalue().splitlines()]
    for p in range(5):
        assert stripped.count(f"{p}: start") == 1
        assert stripped.count(f"{p}: eat") == 2
        assert stripped.count(f"{p}: done") == 2


@pytest.mark.parametrize("p", [-1, 5])
def test_unknown_philosopher(p):
    with pytest.raises(ValueError):
        DiningTable().get_forks(p)


def test_main_usage(capsys):
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 1
    assert capsys.readouterr().err == "usage: dining_philosophers_deadlock <num_loops>\n"


def test_main_runs(capsys):
    assert main(["--no-deadlock", "3"]) == 0
    assert capsys.readouterr().out == "dining: started\ndining: finished\n"