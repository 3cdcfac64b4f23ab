"""Giglio -- micro-benchmark harness built on a one-step-at-a-time sequencer."""

__version__ = "0.1.0"
