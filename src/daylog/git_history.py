"""
Git history provider - suggest issue keys from the commits made on a day
"""

import asyncio
import logging
import re
import subprocess
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

from .errors import GitHistoryError

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 10


class GitHistory:
    """Scans a git repository for issue keys mentioned in commit messages"""

    def __init__(self, repo_path: str = ""):
        """
        Args:
            repo_path: repository to scan; empty means the current directory
        """
        self.repo_path = Path(repo_path).expanduser() if repo_path else Path.cwd()

    def _git(self, *args: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                ["git", *args],
                cwd=str(self.repo_path),
                capture_output=True,
                text=True,
                timeout=GIT_TIMEOUT,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise GitHistoryError(f"git {args[0]} failed: {e}") from e

    def author_email(self) -> Optional[str]:
        result = self._git("config", "user.email")
        email = result.stdout.strip()
        return email if result.returncode == 0 and email else None

    def read_messages(self, day: date) -> str:
        """Subjects and bodies of the commits authored on ``day``"""
        args = [
            "log",
            "--all",
            f"--since={day.isoformat()} 00:00:00",
            f"--until={(day + timedelta(days=1)).isoformat()} 00:00:00",
            "--format=%s%n%b",
        ]
        email = self.author_email()
        if email:
            args.append(f"--author={email}")

        result = self._git(*args)
        if result.returncode != 0:
            raise GitHistoryError(f"git log failed in {self.repo_path}: {result.stderr.strip()}")
        return result.stdout

    def suggested_task_keys(self, project: str, day: date) -> list[str]:
        pattern = re.compile(rf"\b{re.escape(project)}-\d+\b", re.IGNORECASE)
        keys = [match.upper() for match in pattern.findall(self.read_messages(day))]
        keys = list(dict.fromkeys(keys))
        logger.debug(f"Found {len(keys)} keys in git history of {self.repo_path} for {day}")
        return keys

    async def get_suggested_task_keys(self, project: str, day: date) -> list[str]:
        return await asyncio.to_thread(self.suggested_task_keys, project, day)
