"""Tests for the cross-process exclusive storage lock."""

from __future__ import annotations

import subprocess
import sys
import textwrap

import pytest

from habitat.errors import StorageUnavailableError
from habitat.infra.lock import ConcurrencyGate


@pytest.fixture
def lock_path(tmp_path):
    return tmp_path / "habitat.lock"


class TestConcurrencyGate:
    def test_first_holder_acquires(self, lock_path):
        gate = ConcurrencyGate(lock_path, retry_delay=0)
        gate.acquire()
        try:
            assert gate.held
            assert lock_path.exists()
        finally:
            gate.release()
        assert not gate.held

    def test_second_holder_fails_after_retry_budget(self, lock_path):
        sleeps: list[float] = []
        first = ConcurrencyGate(lock_path)
        second = ConcurrencyGate(lock_path, attempts=3, retry_delay=0.25, sleep=sleeps.append)
        first.acquire()
        try:
            with pytest.raises(StorageUnavailableError):
                second.acquire()
        finally:
            first.release()

        assert sleeps == [0.25, 0.25]
        assert not second.held

    def test_release_lets_the_next_caller_in(self, lock_path):
        first = ConcurrencyGate(lock_path, retry_delay=0)
        second = ConcurrencyGate(lock_path, retry_delay=0)

        with first:
            assert not second.try_acquire_exclusive()

        assert second.try_acquire_exclusive()
        second.release()

    def test_acquire_is_reentrant_for_the_holder(self, lock_path):
        gate = ConcurrencyGate(lock_path, retry_delay=0)
        with gate:
            assert gate.try_acquire_exclusive()

    def test_release_without_acquire_is_harmless(self, lock_path):
        ConcurrencyGate(lock_path).release()

    def test_attempts_must_be_positive(self, lock_path):
        with pytest.raises(ValueError):
            ConcurrencyGate(lock_path, attempts=0)


_HOLDER = textwrap.dedent(
    """
    import sys

    from habitat.infra.lock import ConcurrencyGate

    gate = ConcurrencyGate(sys.argv[1], retry_delay=0)
    gate.acquire()
    print("held", flush=True)
    sys.stdin.read()
    """
)


class TestGateAcrossProcesses:
    def test_lock_is_freed_when_the_holding_process_dies(self, lock_path):
        holder = subprocess.Popen(
            [sys.executable, "-c", _HOLDER, str(lock_path)],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            text=True,
        )
        try:
            assert holder.stdout.readline().strip() == "held"

            contender = ConcurrencyGate(lock_path, attempts=2, retry_delay=0)
            with pytest.raises(StorageUnavailableError):
                contender.acquire()
            assert not contender.held
        finally:
            holder.kill()
            holder.wait(timeout=10)
            holder.stdin.close()
            holder.stdout.close()

        contender.acquire()
        try:
            assert contender.held
        finally:
            contender.release()
