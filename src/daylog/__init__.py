"""daylog - Log daily work hours against Jira from git history and assigned issues."""

__version__ = "1.0.0"

from .config import Config
from .gate import GateResult, GateState, advance
from .aggregator import aggregate, already_logged
from .session import Collaborators, Outcome, SessionResult, run_session

__all__ = [
    "Config",
    "GateResult",
    "GateState",
    "advance",
    "aggregate",
    "already_logged",
    "Collaborators",
    "Outcome",
    "SessionResult",
    "run_session",
]
