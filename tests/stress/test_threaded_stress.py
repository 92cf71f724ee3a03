"""
Threaded stress tests for stream lifecycles.

Many consumers open, partially drain, cancel and close streams against a
shared in-memory tree at the same time. Every stream must end with its
worker thread joined.

    pytest tests/stress/ -v
"""

import threading

import pytest

import streamglob
from streamglob import CancelToken, GlobCancelledError
from tests.helpers.backends import wide_tree
from tests.helpers.concurrency import run_concurrent, wait_for_glob_threads


@pytest.fixture
def shared_tree():
    return wide_tree(n_dirs=10, n_files=30)


# ---------------------------------------------------------------------------
# ST-01
# ---------------------------------------------------------------------------


@pytest.mark.p1
def test_concurrent_full_drains(shared_tree):
    """30 threads drain the same pattern; each sees every match exactly once."""
    n_threads = 30

    def drain(i: int) -> list[str]:
        with streamglob.stream("d*/f*", backend=shared_tree) as s:
            return list(s)

    results, errors = run_concurrent(drain, n_threads, timeout=20.0)
    assert errors == [None] * n_threads
    for found in results:
        assert found is not None
        assert len(found) == 300
        assert len(set(found)) == 300
    assert wait_for_glob_threads() == 0


# ---------------------------------------------------------------------------
# ST-02
# ---------------------------------------------------------------------------


@pytest.mark.p1
def test_concurrent_early_close(shared_tree):
    """Streams closed after a few matches never leak their worker."""
    n_threads = 40
    rounds = 25

    def churn(i: int) -> int:
        taken = 0
        for r in range(rounds):
            s = streamglob.stream("d*/f*", backend=shared_tree)
            for _ in range((i + r) % 4):
                if s.next_match() is None:
                    break
                taken += 1
            s.close()
        return taken

    results, errors = run_concurrent(churn, n_threads, timeout=30.0)
    assert errors == [None] * n_threads
    assert all(r is not None for r in results)
    assert wait_for_glob_threads(timeout=10.0) == 0


# ---------------------------------------------------------------------------
# ST-03
# ---------------------------------------------------------------------------


@pytest.mark.p1
def test_shared_token_cancels_everything(shared_tree):
    """One token shared by many streams stops all of them."""
    n_streams = 20
    token = CancelToken()
    streams = [
        streamglob.stream("d*/f*", backend=shared_tree, token=token)
        for _ in range(n_streams)
    ]
    for s in streams:
        assert s.next_match() is not None
    token.cancel()
    for s in streams:
        assert s.next_match() is None
        s.close()
    assert wait_for_glob_threads() == 0
    assert token._callbacks == []


# ---------------------------------------------------------------------------
# ST-04
# ---------------------------------------------------------------------------


@pytest.mark.p1
def test_close_races_with_pulls(shared_tree):
    """close() from one thread while another is pulling never deadlocks."""
    for _ in range(50):
        s = streamglob.stream("d*/f*", backend=shared_tree)
        pulled: list[str] = []

        def puller():
            while True:
                match = s.next_match()
                if match is None:
                    return
                pulled.append(match)

        t = threading.Thread(target=puller)
        t.start()
        s.close()
        t.join(timeout=5.0)
        assert not t.is_alive()
        assert len(pulled) == len(set(pulled))
    assert wait_for_glob_threads() == 0


# ---------------------------------------------------------------------------
# ST-05
# ---------------------------------------------------------------------------


@pytest.mark.p1
def test_tree_mutation_during_traversal(shared_tree):
    """Writers adding and removing entries do not break concurrent traversals."""
    stop = threading.Event()
    errors: list[Exception] = []

    def mutator():
        n = 0
        try:
            while not stop.is_set():
                shared_tree.add_file(f"d{n % 10:02d}/extra{n}")
                shared_tree.remove(f"d{n % 10:02d}/extra{n}")
                n += 1
        except Exception as exc:
            errors.append(exc)

    writer = threading.Thread(target=mutator)
    writer.start()
    try:

        def drain(i: int) -> int:
            return len(streamglob.glob("d*/*", backend=shared_tree))

        results, thread_errors = run_concurrent(drain, 10, timeout=20.0)
    finally:
        stop.set()
        writer.join(timeout=5.0)
    assert errors == []
    assert thread_errors == [None] * 10
    assert all(r is not None and r >= 300 for r in results)


# ---------------------------------------------------------------------------
# ST-06
# ---------------------------------------------------------------------------


@pytest.mark.p1
def test_many_timeouts(shared_tree):
    """Deadlines that fire at random points during traversal are all honoured."""

    def timed(i: int) -> str:
        try:
            streamglob.glob("d*/f*", backend=shared_tree, timeout=i * 0.0005)
        except GlobCancelledError:
            return "cancelled"
        return "done"

    results, errors = run_concurrent(timed, 20, timeout=20.0)
    assert errors == [None] * 20
    assert set(results) <= {"cancelled", "done"}
    assert wait_for_glob_threads() == 0
