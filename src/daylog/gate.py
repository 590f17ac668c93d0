"""
Configuration gate

Walks the user through the missing configuration one field per call and
validates the credentials once host, account and project are all present.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from .config import Config

Validator = Callable[[str, str, str], Awaitable[bool]]

INVALID_CREDENTIALS = "Credentials are invalid. Please try again."


class GateState(Enum):
    NEED_HOST = "need_host"
    NEED_ACCOUNT = "need_account"
    NEED_PROJECT = "need_project"
    VALIDATING = "validating"


@dataclass(frozen=True)
class GateResult:
    config: Config
    ready: bool


def gate_state(config: Config) -> GateState:
    """Fields are checked in a fixed order: host, account, project"""
    if config.is_configured():
        return GateState.VALIDATING
    if not config.has_host():
        return GateState.NEED_HOST
    if not config.has_account():
        return GateState.NEED_ACCOUNT
    return GateState.NEED_PROJECT


async def advance(config: Config, prompter, validator: Validator, logger=None) -> GateResult:
    """
    Take one step towards a complete, valid configuration.

    Returns the next configuration and whether it is ready. On invalid
    credentials the whole configuration is wiped, not just the credentials.
    """
    state = gate_state(config)

    if state is GateState.NEED_HOST:
        host = await prompter.ask_for_host()
        return GateResult(config.with_values(host=host), False)

    if state is GateState.NEED_ACCOUNT:
        account = await prompter.ask_for_account()
        password = await prompter.ask_for_password()
        return GateResult(config.with_values(account=account, password=password), False)

    if state is GateState.NEED_PROJECT:
        project = await prompter.ask_for_project()
        return GateResult(config.with_values(project=project), False)

    valid = await validator(config.host, config.account, config.password)
    if not valid:
        if logger is not None:
            logger.error(INVALID_CREDENTIALS)
        return GateResult(Config(), False)

    return GateResult(config, True)


async def ensure_ready(config: Config, save: Callable[[Config], None],
                       clear: Callable[[], None], prompter, validator: Validator,
                       logger=None) -> Config:
    """Loop the gate until it reports ready, persisting every step"""
    while True:
        result = await advance(config, prompter, validator, logger)
        if result.ready:
            return result.config
        config = result.config
        if config == Config():
            clear()
        else:
            save(config)
