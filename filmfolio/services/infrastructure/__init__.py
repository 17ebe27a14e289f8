"""Infrastructure services - runtime plumbing."""

from .session_sweeper_svc import DEFAULT_SWEEP_INTERVAL_S, SessionSweeperService

__all__ = ["DEFAULT_SWEEP_INTERVAL_S", "SessionSweeperService"]
