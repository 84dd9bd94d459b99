"""
Pytest configuration and shared fixtures for Process Reaper tests.
"""

import logging

import pytest

import process_reaper
from process_reaper import ProcessObservation, SignalResult


KiB = 1024
MiB = 1024 * KiB
GiB = 1024 * MiB


class FakeSampler:
    """In-memory process table standing in for ProcessSampler.

    Processes exit on SIGTERM unless their PID is in `ignores_term`; PIDs in
    `undeliverable` report failed delivery. Every call is appended to `calls`
    so tests can check ordering.
    """

    def __init__(self, processes=(), total=8 * GiB):
        self.processes = {proc.pid: proc for proc in processes}
        self.total = total
        self.ignores_term = set()
        self.undeliverable = set()
        self.terminated = []
        self.killed = []
        self.calls = []
        self.on_sample = None

    def total_memory(self):
        return self.total

    def sample(self, name):
        self.calls.append(('sample', name))
        if self.on_sample:
            self.on_sample()
        return [proc for proc in self.processes.values() if proc.name == name]

    def lookup(self, pid):
        self.calls.append(('lookup', pid))
        return self.processes.get(pid)

    def terminate(self, pid, create_time=None):
        self.calls.append(('terminate', pid))
        self.terminated.append(pid)
        if pid in self.undeliverable:
            return SignalResult(delivered=False, error="Operation not permitted")
        if pid not in self.ignores_term:
            self.processes.pop(pid, None)
        return SignalResult(delivered=True)

    def kill(self, pid, create_time=None):
        self.calls.append(('kill', pid))
        self.killed.append(pid)
        if pid in self.undeliverable:
            return SignalResult(delivered=False, error="Operation not permitted")
        self.processes.pop(pid, None)
        return SignalResult(delivered=True)


class RecordingSleep:
    def __init__(self, calls=None, on_sleep=None):
        self.durations = []
        self.calls = calls
        self.on_sleep = on_sleep

    def __call__(self, seconds):
        self.durations.append(seconds)
        if self.calls is not None:
            self.calls.append(('sleep', seconds))
        if self.on_sleep:
            self.on_sleep()


def observation(pid, rss, name='worker', create_time=1000.0):
    return ProcessObservation(pid=pid, name=name, rss=rss, create_time=create_time)


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers and levels that setup_logging() attached during a test."""
    yield
    logger = process_reaper.logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
