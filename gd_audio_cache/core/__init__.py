"""
Core application engine for the refresh pipeline.

This package contains the primary logic. The `RefreshOrchestrator` drives a
full clear-and-download cycle, delegating id-to-URL resolution to the
resolver and per-level work to the collector. The `RefreshScheduler` fires it
on a cron schedule.
"""
