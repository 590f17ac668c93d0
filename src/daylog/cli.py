#!/usr/bin/env python3
"""
daylog CLI - 記錄每日工時到 Jira

使用 Typer + Rich 提供互動體驗
"""

import asyncio
import logging

import typer
from rich.panel import Panel

from .config import Config
from .console import ConsoleLogger, console
from .prompts import Prompter
from .session import Collaborators, Outcome, SessionResult, run_session

app = typer.Typer(
    name="daylog",
    help="Log today's work hours against a Jira issue",
    no_args_is_help=False,
    add_completion=False,
)


def render_result(result: SessionResult, out: ConsoleLogger) -> int:
    """顯示 session 結果並回傳 exit code"""
    if result.outcome is Outcome.LOGGED:
        out.info(result.message)
    elif result.outcome is Outcome.DECLINED:
        console.print(f"[yellow]{result.message}[/yellow]")
    else:
        out.error(result.message)
    return 0 if result.ok else 1


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def main(
    ctx: typer.Context,
    reset: bool = typer.Option(False, "--reset", help="清除所有已儲存的配置"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="顯示除錯訊息"),
):
    """
    互動式記錄工時

    選擇日期與任務（來自 Git 紀錄與 Jira），確認後寫入 Jira worklog
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    out = ConsoleLogger()

    # --reset only counts on its own; any other combination runs the session
    if reset and not ctx.args:
        Config.clear()
        out.info("All cleared.")
        return

    if ctx.args:
        logging.getLogger(__name__).debug(f"Ignoring extra arguments: {ctx.args}")

    console.print(Panel.fit(
        "[bold]daylog[/bold]\n"
        "記錄每日工時到 Jira",
        title="🕐",
    ))

    result = asyncio.run(run_session(Collaborators(prompter=Prompter(), logger=out)))
    raise typer.Exit(code=render_result(result, out))


if __name__ == "__main__":
    app()
