import psutil

from subprocess_test.platform import WindowsPlatformSupport


class FakeProcess:
    def __init__(self, pid, ppid, create_time, children=()):
        self.pid = pid
        self.info = {"pid": pid, "ppid": ppid, "create_time": create_time}
        self._children = list(children)

    def children(self, recursive=False):
        return self._children


def test_windows_collects_orphans_created_while_child_ran(monkeypatch):
    grandchild = FakeProcess(31, 30, 105.0)
    processes = [
        FakeProcess(30, 7, 102.0, children=[grandchild]),
        # the child's pid was reused after it exited
        FakeProcess(40, 7, 120.0, children=[FakeProcess(41, 40, 121.0)]),
        FakeProcess(50, 8, 103.0),
    ]
    monkeypatch.setattr(psutil, "process_iter", lambda attrs=None: iter(processes))

    pids = WindowsPlatformSupport().collect_lingering_pids(7, started=100.0, exited=110.0)

    assert pids == [30, 31]


def test_windows_ignores_processes_without_creation_time(monkeypatch):
    processes = [FakeProcess(30, 7, None)]
    monkeypatch.setattr(psutil, "process_iter", lambda attrs=None: iter(processes))

    assert WindowsPlatformSupport().collect_lingering_pids(7, started=100.0, exited=110.0) == []

