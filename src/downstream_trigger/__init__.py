"""Downstream build trigger.

Announces the current git commit to downstream projects by creating
Travis CI build requests, with:
- configuration loaded from the environment or `.env`
- structured logging
- a per-target report of every request's outcome
"""

__version__ = "0.1.0"

from downstream_trigger.config import TriggerSettings
from downstream_trigger.trigger import BuildTrigger

__all__ = ["__version__", "BuildTrigger", "TriggerSettings"]
