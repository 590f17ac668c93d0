"""
互動式提示

使用 Rich 的 Prompt / Confirm，阻塞的輸入在背景執行緒中進行，
讓 event loop 可以同時處理 Jira 請求
"""

import asyncio
from datetime import date, datetime, timedelta
from typing import Optional

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from .console import console as default_console
from .models import TaskGroups


class Prompter:
    """Rich 互動提示"""

    def __init__(self, console: Console = None):
        self.console = console or default_console

    async def _run(self, func, *args):
        return await asyncio.to_thread(func, *args)

    # 配置

    async def ask_for_host(self) -> str:
        return await self._run(self._ask_text, "Jira URL (e.g. https://jira.example.com)")

    async def ask_for_account(self) -> str:
        return await self._run(self._ask_text, "Jira 帳號")

    async def ask_for_password(self) -> str:
        return await self._run(self._ask_text, "Jira 密碼 / API Token", True)

    async def ask_for_project(self) -> str:
        project = await self._run(self._ask_text, "Jira Project key (e.g. AB)")
        return project.upper()

    def _ask_text(self, label: str, password: bool = False) -> str:
        while True:
            value = Prompt.ask(label, password=password, console=self.console).strip()
            if value:
                return value
            self.console.print("[red]不可為空[/red]")

    # Session

    async def prompt_day(self) -> date:
        return await self._run(self._prompt_day)

    def _prompt_day(self) -> date:
        today = date.today()
        yesterday = today - timedelta(days=1)

        self.console.print("\n選擇日期:")
        self.console.print(f"  [cyan]1.[/cyan] 今天 ({today.isoformat()})")
        self.console.print(f"  [cyan]2.[/cyan] 昨天 ({yesterday.isoformat()})")
        self.console.print("  [cyan]3.[/cyan] 自訂日期")

        choice = Prompt.ask("\n選擇", choices=["1", "2", "3"], default="1", console=self.console)
        if choice == "1":
            return today
        if choice == "2":
            return yesterday

        while True:
            value = Prompt.ask("日期 (YYYY-MM-DD)", console=self.console)
            try:
                return datetime.strptime(value.strip(), "%Y-%m-%d").date()
            except ValueError:
                self.console.print("[red]無效的日期[/red]")

    async def prompt_task(self, day: date, groups: TaskGroups) -> Optional[str]:
        return await self._run(self._prompt_task, day, groups)

    def _prompt_task(self, day: date, groups: TaskGroups) -> Optional[str]:
        choices = groups.keys()
        if not choices:
            return None

        shown: set[str] = set()
        self.console.print(f"\n[bold]📋 {day.isoformat()} 的任務[/bold]")
        for source, tasks in groups.by_source.items():
            # 同時由兩個來源建議的 issue 只列一次
            fresh = [t for t in tasks if t.key not in shown]
            if not fresh:
                continue
            self.console.print(f"[dim]── {source.label}[/dim]")
            for task in fresh:
                shown.add(task.key)
                self.console.print(f"  [cyan]{choices.index(task.key) + 1}.[/cyan] {task.label}")

        index = IntPrompt.ask(
            "\n選擇任務",
            choices=[str(i) for i in range(1, len(choices) + 1)],
            default=1,
            console=self.console,
        )
        return choices[index - 1]

    async def prompt_hours(self, options: list[int], default: int) -> int:
        return await self._run(self._prompt_hours, options, default)

    def _prompt_hours(self, options: list[int], default: int) -> int:
        self.console.print("[dim]可選: " + ", ".join(f"{n}h" for n in options) + "[/dim]")
        return IntPrompt.ask(
            "工時 (小時)",
            choices=[str(n) for n in options],
            default=default,
            show_choices=False,
            console=self.console,
        )

    async def prompt_confirmation(self, hours: int, task: str) -> bool:
        return await self._run(self._prompt_confirmation, hours, task)

    def _prompt_confirmation(self, hours: int, task: str) -> bool:
        return Confirm.ask(f"\n確認記錄 [magenta]{hours}h[/magenta] 到 [cyan]{task}[/cyan]?",
                           default=True, console=self.console)
