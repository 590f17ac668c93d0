"""
Jira API 整合模組

支援:
- Basic Auth (帳號 + 密碼 / API Token)
- 依 JQL 查詢建議的 issue
- 查詢與新增 Jira 原生 worklog
"""

import asyncio
import base64
import logging
import threading
from datetime import date, datetime, time, timedelta
from typing import Optional

import requests

from .errors import TrackerError
from .models import TaskRecord, Worklog

logger = logging.getLogger(__name__)

# 網路請求預設 timeout（秒）
DEFAULT_TIMEOUT = 30
# JQL 有長度限制，分批處理
BATCH_SIZE = 50

IN_PROGRESS_STATUS = "In Progress"


class JiraClient:
    """
    Jira REST API 客戶端

    requests.Session 不保證 thread-safe，而 JiraTracker 會透過 to_thread
    並行呼叫，所以每個 thread 各自持有一個 session。
    """

    def __init__(self, base_url: str, account: str, password: str):
        """
        初始化 Jira 客戶端

        Args:
            base_url: Jira URL (e.g., https://jira.example.com)
            account: Jira 帳號或 Email
            password: 密碼或 API Token
        """
        self.base_url = base_url.rstrip('/')

        auth_string = base64.b64encode(f"{account}:{password}".encode()).decode()
        self._headers = {
            "Authorization": f"Basic {auth_string}",
            "Content-Type": "application/json",
            "Accept": "application/json"
        }
        self._local = threading.local()
        self._myself: Optional[dict] = None
        self._myself_lock = threading.Lock()
        # 建構時先建立目前 thread 的 session
        self._local.session = self._new_session()

    @property
    def session(self) -> requests.Session:
        """目前 thread 專用的 session"""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = self._new_session()
        return session

    def _new_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(self._headers)
        return session

    def get_myself(self) -> dict:
        """獲取當前用戶資訊"""
        resp = self.session.get(f"{self.base_url}/rest/api/2/myself", timeout=DEFAULT_TIMEOUT)
        resp.raise_for_status()
        return resp.json()

    @property
    def myself(self) -> dict:
        with self._myself_lock:
            if self._myself is None:
                self._myself = self.get_myself()
            return self._myself

    def is_me(self, author: dict) -> bool:
        """判斷 worklog 作者是否為當前用戶"""
        # Jira Server 使用 'name' 或 'key'，Cloud 使用 'accountId'
        for field in ("accountId", "key", "name"):
            mine = self.myself.get(field)
            if mine and author.get(field) == mine:
                return True
        return False

    def search(self, jql: str, fields: str = "summary") -> list[dict]:
        """以 JQL 查詢 issue，自動處理分頁"""
        issues = []
        start_at = 0

        while True:
            params = {
                "jql": jql,
                "fields": fields,
                "startAt": start_at,
                "maxResults": BATCH_SIZE,
                "validateQuery": "warn",
            }
            resp = self.session.get(f"{self.base_url}/rest/api/2/search", params=params,
                                    timeout=DEFAULT_TIMEOUT)
            resp.raise_for_status()
            data = resp.json()

            page = data.get("issues", [])
            issues.extend(page)
            start_at += len(page)

            if not page or start_at >= data.get("total", 0):
                break

        return issues

    def find_tasks_with_keys(self, keys: list[str]) -> list[TaskRecord]:
        """
        批次取得多個 Issue

        Args:
            keys: Issue key 列表，可包含重複

        Returns:
            TaskRecord 列表，依 key 首次出現的順序；不存在的 key 會被略過
        """
        unique_keys = list(dict.fromkeys(keys))
        if not unique_keys:
            return []

        found: dict[str, TaskRecord] = {}
        for i in range(0, len(unique_keys), BATCH_SIZE):
            batch = unique_keys[i:i + BATCH_SIZE]
            jql = f"key in ({','.join(batch)})"
            for issue in self.search(jql, fields="summary"):
                key = issue.get("key")
                summary = issue.get("fields", {}).get("summary", "")
                found[key] = TaskRecord(key=key, name=summary)

        return [found[key] for key in unique_keys if key in found]

    def get_suggested_task_keys(self, project: str, day: date) -> list[str]:
        """當天指派給自己且處於進行中的 issue"""
        jql = (
            f'project = "{project}" '
            f'AND assignee was currentUser() ON "{day.isoformat()}" '
            f'AND status was "{IN_PROGRESS_STATUS}" ON "{day.isoformat()}"'
        )
        return [issue["key"] for issue in self.search(jql, fields="key")]

    def get_worklogs(self, project: str, day: date) -> list[Worklog]:
        """獲取當前用戶在指定日期的所有 worklog"""
        next_day = day + timedelta(days=1)
        jql = (
            f'project = "{project}" '
            f'AND worklogDate >= "{day.isoformat()}" AND worklogDate < "{next_day.isoformat()}" '
            f'AND worklogAuthor = currentUser()'
        )

        worklogs = []
        for issue in self.search(jql, fields="key"):
            url = f"{self.base_url}/rest/api/2/issue/{issue['key']}/worklog"
            resp = self.session.get(url, timeout=DEFAULT_TIMEOUT)
            resp.raise_for_status()

            for item in resp.json().get("worklogs", []):
                started = self._parse_jira_date(item.get("started", ""))
                if started != day or not self.is_me(item.get("author", {})):
                    continue
                worklogs.append(Worklog(date=started, hours=item.get("timeSpentSeconds", 0) / 3600))

        return worklogs

    def add_worklog(self, day: date, key: str, hours: float) -> dict:
        """添加 worklog 到 Jira issue (使用 Jira 原生 worklog API)"""
        url = f"{self.base_url}/rest/api/2/issue/{key}/worklog"

        payload = {
            "timeSpentSeconds": int(hours * 3600),
            "started": self._format_jira_datetime(day),
        }

        resp = self.session.post(url, json=payload, timeout=DEFAULT_TIMEOUT)
        resp.raise_for_status()
        return resp.json()

    def _format_jira_datetime(self, day: date) -> str:
        """格式化日期為 Jira 接受的格式"""
        # Jira 需要 ISO 8601 格式: 2025-12-31T09:00:00.000+0800
        dt = datetime.combine(day, time(9, 0)).astimezone()
        return dt.strftime("%Y-%m-%dT%H:%M:%S.000%z")

    @staticmethod
    def _parse_jira_date(value: str) -> Optional[date]:
        try:
            return datetime.strptime(value[:10], "%Y-%m-%d").date()
        except ValueError:
            return None


class JiraTracker:
    """JiraClient 的非同步包裝，供 session 並行呼叫"""

    def __init__(self, client: JiraClient):
        self.client = client

    async def _call(self, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except requests.exceptions.RequestException as e:
            logger.debug(f"Jira request {func.__name__} failed: {e}")
            raise TrackerError(f"{func.__name__} failed: {e}") from e

    async def get_suggested_task_keys(self, project: str, day: date) -> list[str]:
        return await self._call(self.client.get_suggested_task_keys, project, day)

    async def find_tasks_with_keys(self, keys: list[str]) -> list[TaskRecord]:
        return await self._call(self.client.find_tasks_with_keys, keys)

    async def get_worklogs(self, project: str, day: date) -> list[Worklog]:
        return await self._call(self.client.get_worklogs, project, day)

    async def send_worklog(self, day: date, key: str, hours: float) -> None:
        await self._call(self.client.add_worklog, day, key, hours)
        logger.info(f"Logged {hours}h on {key} for {day.isoformat()}")


def initialize(host: str, account: str, password: str) -> JiraTracker:
    """建立已認證的 Jira session"""
    return JiraTracker(JiraClient(host, account, password))


async def check_credentials(host: str, account: str, password: str) -> bool:
    """測試帳號密碼是否可通過 Jira 認證"""
    client = JiraClient(host, account, password)
    try:
        await asyncio.to_thread(client.get_myself)
    except requests.exceptions.HTTPError as e:
        if e.response is not None and e.response.status_code in (401, 403):
            logger.debug(f"Credentials rejected by {host}: {e.response.status_code}")
            return False
        raise TrackerError(f"Credential check failed: {e}") from e
    except requests.exceptions.RequestException as e:
        raise TrackerError(f"Cannot reach {host}: {e}") from e
    return True
