import threading

import pytest

from carease.errors import ConcurrentUpdateError

from conftest import add_doctor


def test_memory_update_same_version_only_one_writer_wins(repos):
    add_doctor(repos, "d1")
    writers = 8
    barrier = threading.Barrier(writers)
    outcomes = []

    def toggle(value):
        barrier.wait()
        try:
            repos.users.update("d1", expected_version=1, is_subscribed=value)
            outcomes.append("ok")
        except ConcurrentUpdateError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=toggle, args=(i % 2 == 0,)) for i in range(writers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == writers - 1
    assert repos.users.get("d1").version == 2


def test_memory_update_without_version_always_applies(repos):
    add_doctor(repos, "d1")

    for value in (True, False):
        repos.users.update("d1", is_subscribed=value)

    assert repos.users.get("d1").version == 3
    with pytest.raises(ConcurrentUpdateError):
        repos.users.update("d1", expected_version=1, is_subscribed=True)
