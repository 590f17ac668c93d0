"""
配置管理模組

Jira 連接資訊與每日工時設定，存放於 ~/.daylog/config.json
"""

import json
import os
from pathlib import Path
from dataclasses import dataclass, asdict, replace

from dotenv import load_dotenv


CONFIG_DIR = Path.home() / ".daylog"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_HOURS_PER_DAY = 8

# 環境變數覆寫 (亦可放在 .env)
ENV_OVERRIDES = {
    "DAYLOG_HOST": "host",
    "DAYLOG_ACCOUNT": "account",
    "DAYLOG_PASSWORD": "password",
    "DAYLOG_PROJECT": "project",
    "DAYLOG_HOURS_PER_DAY": "hours_per_day",
    "DAYLOG_REPO": "repo_path",
}


def _parse_hours(value) -> int:
    try:
        hours = int(value)
    except (TypeError, ValueError):
        return DEFAULT_HOURS_PER_DAY
    return hours if hours > 0 else DEFAULT_HOURS_PER_DAY


@dataclass(frozen=True)
class Config:
    """應用程式配置"""
    host: str = ""                        # Jira URL
    account: str = ""                     # Jira 帳號
    password: str = ""                    # 密碼或 API Token
    project: str = ""                     # Jira project key, e.g. "AB"
    hours_per_day: int = DEFAULT_HOURS_PER_DAY
    repo_path: str = ""                   # 掃描的 Git 倉庫，空則使用目前目錄

    def __post_init__(self):
        object.__setattr__(self, "hours_per_day", _parse_hours(self.hours_per_day))

    @classmethod
    def load(cls) -> "Config":
        """載入配置"""
        data = {}
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE) as f:
                    raw = json.load(f)
                data = {k: v for k, v in raw.items() if k in cls.__dataclass_fields__}
            except (OSError, ValueError, AttributeError):
                data = {}

        load_dotenv()
        for env_name, field_name in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                data[field_name] = value

        return cls(**data)

    def save(self):
        """儲存配置"""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, 'w') as f:
            json.dump(asdict(self), f, indent=2)
        # 設定檔案權限為僅擁有者可讀寫
        CONFIG_FILE.chmod(0o600)

    @staticmethod
    def clear():
        """清除所有已儲存的配置"""
        CONFIG_FILE.unlink(missing_ok=True)

    def has_host(self) -> bool:
        return bool(self.host)

    def has_account(self) -> bool:
        return bool(self.account)

    def has_project(self) -> bool:
        return bool(self.project)

    def is_configured(self) -> bool:
        """檢查是否已配置必要項目"""
        return self.has_host() and self.has_account() and self.has_project()

    def with_values(self, **changes) -> "Config":
        return replace(self, **changes)
