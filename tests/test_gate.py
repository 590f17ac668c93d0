"""Tests for the configuration gate."""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from daylog.config import Config
from daylog.gate import (
    GateState, INVALID_CREDENTIALS, advance, ensure_ready, gate_state,
)


def solicited(prompter) -> set[str]:
    names = ["ask_for_host", "ask_for_account", "ask_for_password", "ask_for_project"]
    return {name for name in names if getattr(prompter, name).await_count}


class TestGateState:
    """Tests for the fixed field order."""

    def test_states_in_order(self, full_config):
        assert gate_state(Config()) is GateState.NEED_HOST
        assert gate_state(full_config.with_values(host="")) is GateState.NEED_HOST
        assert gate_state(full_config.with_values(account="")) is GateState.NEED_ACCOUNT
        assert gate_state(full_config.with_values(project="")) is GateState.NEED_PROJECT
        assert gate_state(full_config) is GateState.VALIDATING


class TestAdvance:
    """Tests for a single gate step."""

    @pytest.mark.parametrize("missing, expected", [
        ("host", {"ask_for_host"}),
        ("account", {"ask_for_account", "ask_for_password"}),
        ("project", {"ask_for_project"}),
    ])
    def test_solicits_only_missing_field(self, full_config, prompter, missing, expected):
        """Test a config missing one field asks for exactly that field."""
        validator = AsyncMock(return_value=True)
        config = full_config.with_values(**{missing: ""})

        result = asyncio.run(advance(config, prompter, validator))

        assert result.ready is False
        assert solicited(prompter) == expected
        assert result.config.is_configured()
        validator.assert_not_awaited()

    def test_account_step_stores_password(self, full_config, prompter):
        """Test the account step collects the password too."""
        prompter.ask_for_password.return_value = "new-secret"
        config = full_config.with_values(account="", password="")

        result = asyncio.run(advance(config, prompter, AsyncMock()))

        assert result.config.account == "dev"
        assert result.config.password == "new-secret"

    def test_invalid_credentials_wipe_everything(self, full_config, prompter, out):
        """Test invalid credentials clear every field and report an error."""
        validator = AsyncMock(return_value=False)

        result = asyncio.run(advance(full_config, prompter, validator, out))

        assert result.ready is False
        assert result.config.has_host() is False
        assert result.config.has_account() is False
        assert result.config.has_project() is False
        assert result.config.password == ""
        out.error.assert_called_once_with(INVALID_CREDENTIALS)
        assert solicited(prompter) == set()

    def test_valid_credentials_ready(self, full_config, prompter):
        """Test a complete, valid config is ready after one validation."""
        validator = AsyncMock(return_value=True)

        result = asyncio.run(advance(full_config, prompter, validator))

        assert result.ready is True
        assert result.config == full_config
        validator.assert_awaited_once_with("https://jira.example.com", "dev", "secret")

    def test_validates_again_on_each_call(self, full_config, prompter):
        """Test calling advance twice performs two single validations."""
        validator = AsyncMock(return_value=True)

        asyncio.run(advance(full_config, prompter, validator))
        asyncio.run(advance(full_config, prompter, validator))

        assert validator.await_count == 2

    def test_validator_failure_propagates(self, full_config, prompter):
        """Test errors other than invalid credentials are not swallowed."""
        validator = AsyncMock(side_effect=RuntimeError("unreachable"))

        with pytest.raises(RuntimeError):
            asyncio.run(advance(full_config, prompter, validator))


class TestEnsureReady:
    """Tests for the gate loop."""

    def test_collects_everything_from_scratch(self, prompter):
        """Test an empty config walks host, account, project then validates."""
        save, clear = MagicMock(), MagicMock()
        validator = AsyncMock(return_value=True)

        config = asyncio.run(ensure_ready(Config(), save, clear, prompter, validator))

        assert config.host == "https://jira.example.com"
        assert config.account == "dev"
        assert config.project == "AB"
        assert save.call_count == 3
        clear.assert_not_called()
        validator.assert_awaited_once()

    def test_restarts_after_invalid_credentials(self, full_config, prompter, out):
        """Test the flow returns to the host prompt after a wipe."""
        save, clear = MagicMock(), MagicMock()
        validator = AsyncMock(side_effect=[False, True])

        config = asyncio.run(ensure_ready(full_config, save, clear, prompter, validator, out))

        clear.assert_called_once()
        prompter.ask_for_host.assert_awaited_once()
        prompter.ask_for_account.assert_awaited_once()
        prompter.ask_for_project.assert_awaited_once()
        assert config.is_configured()
        assert validator.await_count == 2
