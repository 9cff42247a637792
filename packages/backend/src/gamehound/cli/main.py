"""GameHound CLI — run the server, manage users, and work with projects.

Usage:
    gamehound serve                              # Run the API with uvicorn
    gamehound init-db                            # Create missing tables
    gamehound set-role ann@studio.dev lead       # Promote a user (direct DB)
    gamehound register ann@studio.dev "Ann"      # Create an account, print a token
    gamehound login ann@studio.dev               # Print a bearer token
    gamehound projects                           # List your projects
    gamehound add-project "Silksong" -p 85       # Create a project
    gamehound rm-project 3                       # Delete a project
    gamehound stats                              # Dashboard numbers

API commands read the token from --token or GAMEHOUND_TOKEN and the
server from GAMEHOUND_API_URL.
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Optional

import click
import httpx

from gamehound import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:3000"


def _api_url() -> str:
    return os.environ.get("GAMEHOUND_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the GameHound backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0, headers=headers)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    return asyncio.run(coro)


def _require_token(token: Optional[str]) -> str:
    tok = token or os.environ.get("GAMEHOUND_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set GAMEHOUND_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return tok


def _check(r: httpx.Response) -> dict | list:
    """Return the JSON body, or print the API's error and exit."""
    if r.is_success:
        return r.json()
    try:
        message = r.json().get("error", r.text)
    except ValueError:
        message = r.text
    click.secho(f"Error ({r.status_code}): {message}", fg="red", err=True)
    sys.exit(1)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


def _status_color(status: str) -> str:
    colors = {
        "active": "yellow",
        "completed": "green",
        "planned": "cyan",
    }
    return colors.get(status, "white")


token_option = click.option(
    "--token", envvar="GAMEHOUND_TOKEN", help="Bearer token (or set GAMEHOUND_TOKEN)"
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="gamehound")
def main():
    """GameHound — project tracking for game-development teams."""


# ---------------------------------------------------------------------------
# Server and admin commands (local, no HTTP)
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default from settings)")
@click.option("--port", type=int, default=None, help="Port (default from settings)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from gamehound.config import settings

    uvicorn.run(
        "gamehound.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
def init_db():
    """Create any missing tables in the configured database."""
    _run(_init_db_impl())
    click.secho("Database ready.", fg="green")


async def _init_db_impl():
    from gamehound.config import settings
    from gamehound.db.engine import build_engine, init_schema

    engine = build_engine(settings.database_url)
    try:
        await init_schema(engine)
    finally:
        await engine.dispose()


@main.command("set-role")
@click.argument("email")
@click.argument("role", type=click.Choice(["developer", "lead"]))
def set_role(email: str, role: str):
    """Change a user's role. Leads see and manage every project."""
    _run(_set_role_impl(email, role))


async def _set_role_impl(email: str, role: str):
    from gamehound.config import settings
    from gamehound.db.engine import build_engine, build_session_factory
    from gamehound.errors import GameHoundError
    from gamehound.services.user_service import UserService

    engine = build_engine(settings.database_url)
    try:
        async with build_session_factory(engine)() as session:
            try:
                user = await UserService(session).set_role(email, role)
            except GameHoundError as e:
                click.secho(f"Error: {e.message}", fg="red", err=True)
                sys.exit(1)
        click.secho(f"{user.email} is now {user.role}", fg="green")
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# Account commands
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.argument("name")
@click.password_option()
def register(email: str, name: str, password: str):
    """Create an account and print its bearer token."""
    _run(_auth_impl("/api/register", {"email": email, "password": password, "name": name}))


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and print a bearer token."""
    _run(_auth_impl("/api/login", {"email": email, "password": password}))


async def _auth_impl(path: str, body: dict):
    async with _client() as c:
        data = _check(await c.post(path, json=body))
    click.secho(data["message"], fg="green", err=True)
    click.echo(data["token"])


# ---------------------------------------------------------------------------
# Project commands
# ---------------------------------------------------------------------------


@main.command()
@token_option
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def projects(token: Optional[str], as_json: bool):
    """List the projects you can see."""
    _run(_projects_impl(_require_token(token), as_json))


async def _projects_impl(token: str, as_json: bool):
    async with _client(token) as c:
        rows = _check(await c.get("/api/projects"))

    if as_json:
        click.echo(json.dumps(rows, indent=2, default=str))
        return
    if not rows:
        click.echo("No projects found.")
        return

    _print_table(rows, [
        ("ID", "id", 5),
        ("TITLE", "title", 30),
        ("STATUS", "status", 10),
        ("PROGRESS", "progress", 8),
        ("OWNER", "owner_name", 20),
    ])


@main.command("add-project")
@click.argument("title")
@token_option
@click.option("--description", "-d", default=None)
@click.option("--status", "-s", default="active", show_default=True)
@click.option("--progress", "-p", type=int, default=0, show_default=True)
def add_project(token: Optional[str], title: str, description: Optional[str],
                status: str, progress: int):
    """Create a project you own."""
    _run(_add_project_impl(_require_token(token), {
        "title": title,
        "description": description,
        "status": status,
        "progress": progress,
    }))


async def _add_project_impl(token: str, body: dict):
    async with _client(token) as c:
        data = _check(await c.post("/api/projects", json=body))
    click.secho(f"Project #{data['id']} created", fg="green")


@main.command("update-project")
@click.argument("project_id", type=int)
@token_option
@click.option("--title", "-t", default=None)
@click.option("--description", "-d", default=None)
@click.option("--status", "-s", default=None)
@click.option("--progress", "-p", type=int, default=None)
def update_project(token: Optional[str], project_id: int, title: Optional[str],
                   description: Optional[str], status: Optional[str],
                   progress: Optional[int]):
    """Change fields of a project you own. Omitted fields are left alone."""
    fields = {"title": title, "description": description,
              "status": status, "progress": progress}
    body = {k: v for k, v in fields.items() if v is not None}
    if not body:
        click.secho("Error: nothing to update", fg="red", err=True)
        sys.exit(1)
    _run(_update_project_impl(_require_token(token), project_id, body))


async def _update_project_impl(token: str, project_id: int, body: dict):
    async with _client(token) as c:
        data = _check(await c.put(f"/api/projects/{project_id}", json=body))
    color = "green" if data["result"] == "applied" else "yellow"
    click.secho(data["message"], fg=color)


@main.command("rm-project")
@click.argument("project_id", type=int)
@token_option
def rm_project(token: Optional[str], project_id: int):
    """Delete a project you own."""
    _run(_rm_project_impl(_require_token(token), project_id))


async def _rm_project_impl(token: str, project_id: int):
    async with _client(token) as c:
        data = _check(await c.delete(f"/api/projects/{project_id}"))
    color = "green" if data["result"] == "applied" else "yellow"
    click.secho(data["message"], fg=color)


@main.command()
@token_option
def stats(token: Optional[str]):
    """Project counts by status and average progress."""
    _run(_stats_impl(_require_token(token)))


async def _stats_impl(token: str):
    async with _client(token) as c:
        data = _check(await c.get("/api/projects/stats"))

    click.secho(f"Projects: {data['total']}", bold=True)
    for status, count in data["by_status"].items():
        click.echo(f"  {click.style(status, fg=_status_color(status)):20s}  {count}")
    click.echo(f"Average progress: {data['average_progress']}%")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
