"""Distributed arithmetic calculator: HTTP orchestrator, task service, scheduler and computing agents."""

__version__ = "0.1.0"