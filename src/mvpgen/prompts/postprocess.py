"""Run a workflow's custom post-processing scripts."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from rich.markup import escape

from mvpgen.config.schema import WorkflowConfig
from mvpgen.console import console
from mvpgen.errors import PostProcessScriptError

logger = logging.getLogger(__name__)


def answer_to_env(value: Any) -> str:
    """Render an answer as an environment variable value."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(answer_to_env(v) for v in value)
    return str(value)


def build_script_env(answers: Mapping[str, Any]) -> dict[str, str]:
    """Process environment overlaid with the collected answers."""
    env = dict(os.environ)
    env.update({name: answer_to_env(value) for name, value in answers.items()})
    return env


def execute_post_processing(
    workflow: WorkflowConfig, answers: Mapping[str, Any], target_dir: Path
) -> list[str]:
    """Run each custom script in `target_dir`.

    Stops at the first script exiting non-zero and raises
    PostProcessScriptError. Returns the scripts that ran.
    """
    post = workflow.post_process
    if post is None or not post.custom_scripts:
        return []

    console.print("\n[cyan]Executing post-processing steps...[/cyan]")
    env = build_script_env(answers)
    ran: list[str] = []

    for script in post.custom_scripts:
        console.print(f"[dim]  Running: {escape(script)}[/dim]")
        logger.debug("Post-process script in %s: %s", target_dir, script)
        result = subprocess.run(script, shell=True, cwd=target_dir, env=env)
        if result.returncode != 0:
            raise PostProcessScriptError(script, result.returncode)
        ran.append(script)

    console.print("[green]Post-processing completed[/green]")
    return ran
