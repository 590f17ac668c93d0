"""
Session orchestration

One invocation: configuration gate, task aggregation, hours budget,
confirmation and commit. Nothing here prints; the outcome is returned as a
SessionResult and rendered by the CLI.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from . import jira_api
from .aggregator import aggregate, already_logged, default_hours, hour_options
from .config import Config
from .gate import ensure_ready
from .git_history import GitHistory
from .models import SessionState

logger = logging.getLogger(__name__)

NO_TASKS_MESSAGE = "Could not find any task to choose from."
ABORTED_MESSAGE = "Ok, aborted."
FAILURE_MESSAGE = "An error occurred. Please try again or contact the author. Sorry!"


class Outcome(Enum):
    LOGGED = "logged"
    DECLINED = "declined"
    NO_TASKS = "no_tasks"
    FAILED = "failed"


@dataclass
class SessionResult:
    outcome: Outcome
    message: str
    hours: Optional[int] = None
    task: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.outcome is not Outcome.FAILED


@dataclass
class Collaborators:
    """Everything a session talks to; replaced by fakes in tests"""
    prompter: object
    logger: object
    load: Callable[[], Config] = Config.load
    save: Callable[[Config], None] = Config.save
    clear: Callable[[], None] = Config.clear
    check_credentials: Callable = jira_api.check_credentials
    initialize: Callable = jira_api.initialize
    history_factory: Callable = GitHistory


async def _session(deps: Collaborators) -> SessionResult:
    config = await ensure_ready(deps.load(), deps.save, deps.clear,
                                deps.prompter, deps.check_credentials, deps.logger)

    tracker = deps.initialize(config.host, config.account, config.password)
    history = deps.history_factory(config.repo_path)
    state = SessionState()

    state.day = await deps.prompter.prompt_day()

    # start early, consume late: the budget is only needed after the task choice
    tasks_future = asyncio.ensure_future(aggregate(config.project, state.day, history, tracker))
    logged_future = asyncio.ensure_future(already_logged(config.project, state.day, tracker))

    try:
        groups = await tasks_future
        if groups.is_empty():
            return SessionResult(Outcome.NO_TASKS, NO_TASKS_MESSAGE)

        state.task = await deps.prompter.prompt_task(state.day, groups)
        if state.task is None:
            return SessionResult(Outcome.NO_TASKS, NO_TASKS_MESSAGE)

        logged = await logged_future
        state.hours = await deps.prompter.prompt_hours(
            hour_options(config.hours_per_day),
            default_hours(config.hours_per_day, logged),
        )
    finally:
        if not logged_future.done():
            logged_future.cancel()
        elif not logged_future.cancelled() and logged_future.exception() is not None:
            logger.debug(f"Worklog fetch failed: {logged_future.exception()!r}")

    state.confirmed = await deps.prompter.prompt_confirmation(state.hours, state.task)
    if not state.confirmed:
        return SessionResult(Outcome.DECLINED, ABORTED_MESSAGE, hours=state.hours, task=state.task)

    await tracker.send_worklog(state.day, state.task, state.hours)
    return SessionResult(
        Outcome.LOGGED,
        f"Successfully logged {state.hours}h of work.",
        hours=state.hours,
        task=state.task,
    )


async def run_session(deps: Collaborators) -> SessionResult:
    """Run one interactive session; every unexpected failure becomes FAILED"""
    try:
        return await _session(deps)
    except Exception as e:
        logger.debug("Session failed", exc_info=True)
        return SessionResult(Outcome.FAILED, FAILURE_MESSAGE, error=e)
