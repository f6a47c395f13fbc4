# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""photo-editor command line client."""

from typing import Optional, Tuple

import click
import requests

from photo_editor.client.api_client import APIError, PhotoEditorClient
from photo_editor.client.config import (
    CONFIG_FILE,
    CONFIG_KEYS,
    load_config,
    save_config,
)
from photo_editor.client.output import format_age, format_table
from photo_editor.client.poller import PollOutcome, TaskPoller


def _fail(message: str) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    raise SystemExit(1)


def _client(ctx: click.Context) -> PhotoEditorClient:
    config = ctx.obj["config"]
    if not config.get("token"):
        _fail("Not authenticated. Set a token with 'photo-editor config set token TOKEN'")
    return PhotoEditorClient(config["server"], config["token"])


def _call(func, *args, **kwargs):
    """Run an API call, turning transport and API errors into CLI errors"""
    try:
        return func(*args, **kwargs)
    except APIError as e:
        _fail(f"{e.status_code} - {e.message}")
    except requests.exceptions.ConnectionError as e:
        _fail(f"Failed to connect to server: {e}")
    except requests.exceptions.Timeout:
        _fail("Request timeout")


@click.group()
@click.option("-s", "--server", default=None, help="API server URL (optional)")
@click.pass_context
def cli(ctx: click.Context, server: Optional[str]):
    """AI photo editor client.

    \b
    Examples:
      photo-editor models
      photo-editor new-session
      photo-editor generate "Make the sky purple" --wait
      photo-editor status TASK_ID
    """
    config = load_config()
    if server:
        config["server"] = server
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.group("config")
def config_cmd():
    """Manage photo-editor configuration.

    \b
    Examples:
      photo-editor config view
      photo-editor config set server URL
      photo-editor config set token TOKEN
      photo-editor config set model google/nano-banana
    """
    pass


@config_cmd.command("view")
def config_view():
    """View current configuration."""
    config = load_config()
    click.echo(f"Configuration file: {CONFIG_FILE}")
    click.echo("")
    click.echo(f"server: {config.get('server') or 'not set'}")
    click.echo(f"token:  {'****' if config.get('token') else 'not set'}")
    click.echo(f"model:  {config.get('model') or 'not set'}")


@config_cmd.command("set")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
@click.argument("value")
def config_set(key: str, value: str):
    """Set a configuration value."""
    config = load_config()
    config[key] = value
    save_config(config)
    display_value = "****" if key == "token" else value
    click.echo(f"Set {key} = {display_value}")


@cli.command("models")
@click.pass_context
def models_cmd(ctx: click.Context):
    """List available models and their credit cost."""
    data = _call(_client(ctx).list_models)
    rows = [
        [
            model["id"],
            model["name"],
            str(model["creditsPerUse"]),
            "yes" if model.get("affordable") else "no",
        ]
        for model in data.get("models", [])
    ]
    click.echo(format_table(["ID", "NAME", "CREDITS", "AFFORDABLE"], rows))
    click.echo("")
    click.echo(f"Balance: {data.get('balance')}  Default: {data.get('defaultModelId')}")


@cli.command("sessions")
@click.option("-l", "--limit", type=click.IntRange(1, 100), default=None)
@click.pass_context
def sessions_cmd(ctx: click.Context, limit: Optional[int]):
    """List sessions, most recently active first."""
    sessions = _call(_client(ctx).list_sessions, limit)
    rows = [
        [
            session["id"],
            session["title"],
            str(session["taskCount"]),
            format_age(session.get("lastActivity")),
        ]
        for session in sessions
    ]
    click.echo(format_table(["ID", "TITLE", "TASKS", "ACTIVE"], rows))


@cli.command("new-session")
@click.pass_context
def new_session_cmd(ctx: click.Context):
    """Start a session (an empty latest session is reused)."""
    data = _call(_client(ctx).create_session)
    state = "created" if data.get("isNew") else "reused"
    click.echo(f"{data['sessionId']} ({state})")


@cli.command("tasks")
@click.argument("session_id")
@click.pass_context
def tasks_cmd(ctx: click.Context, session_id: str):
    """List the tasks of a session in order."""
    tasks = _call(_client(ctx).list_session_tasks, session_id)
    rows = [
        [
            str(task["sequenceOrder"]),
            task["id"],
            task["status"],
            task["prompt"][:40],
            format_age(task.get("createdAt")),
        ]
        for task in tasks
    ]
    click.echo(format_table(["#", "ID", "STATUS", "PROMPT", "AGE"], rows))


def _print_task(task: dict) -> None:
    click.echo(f"Task:    {task['id']}")
    click.echo(f"Status:  {task['status']}")
    click.echo(f"Prompt:  {task.get('prompt', '')}")
    if task.get("outputImageUrl"):
        click.echo(f"Output:  {task['outputImageUrl']}")
    if task.get("errorMessage"):
        click.echo(f"Error:   {task['errorMessage']}")


@cli.command("generate")
@click.argument("prompt")
@click.option("--session", "session_id", default=None, help="Session id (default: new or reused)")
@click.option("-m", "--model", "model_id", default=None, help="Model id")
@click.option("-i", "--image", "images", multiple=True, help="Input image URL")
@click.option("--wait/--no-wait", default=False, help="Poll until the task finishes")
@click.option("--interval", type=float, default=5.0, show_default=True)
@click.option("--max-attempts", type=int, default=60, show_default=True)
@click.pass_context
def generate_cmd(
    ctx: click.Context,
    prompt: str,
    session_id: Optional[str],
    model_id: Optional[str],
    images: Tuple[str, ...],
    wait: bool,
    interval: float,
    max_attempts: int,
):
    """Submit a prompt for generation.

    \b
    Examples:
      photo-editor generate "Add a rainbow" -i https://example.com/a.png --wait
    """
    client = _client(ctx)

    if not model_id:
        model_id = ctx.obj["config"].get("model") or _call(client.list_models)[
            "defaultModelId"
        ]
    if not session_id:
        session_id = _call(client.create_session)["sessionId"]

    data = _call(client.process, session_id, prompt, model_id, list(images) or None)
    task_id = data["taskId"]
    for warning in data.get("warnings", []):
        click.echo(click.style(f"Warning: {warning}", fg="yellow"), err=True)
    click.echo(f"Task {task_id} submitted (session {session_id})")

    if not wait:
        return

    poller = TaskPoller(client, interval=interval, max_attempts=max_attempts)
    try:
        result = _call(poller.poll, task_id)
    except KeyboardInterrupt:
        poller.stop()
        click.echo("Stopped waiting; the task keeps running on the server.")
        return

    if result.outcome == PollOutcome.COMPLETED:
        click.echo(click.style("✓ Completed", fg="green"))
        click.echo(f"Output: {result.output_image_url}")
    elif result.outcome == PollOutcome.FAILED:
        _fail(result.error_message or "Generation failed")
    elif result.outcome == PollOutcome.NOT_FOUND:
        _fail(f"Task {task_id} not found")
    elif result.outcome == PollOutcome.TIMEOUT:
        click.echo(
            f"Still processing after {result.attempts} checks. "
            f"Run 'photo-editor status {task_id}' later."
        )


@cli.command("status")
@click.argument("task_id")
@click.pass_context
def status_cmd(ctx: click.Context, task_id: str):
    """Show the status of a task."""
    _print_task(_call(_client(ctx).get_task, task_id))


if __name__ == "__main__":
    cli()
