"""Inkpot CLI: sign up, sign in, and manage your blogs from the terminal.

Usage:
    inkpot signup                          # Prompt for name/email/password, print token
    inkpot signin                          # Prompt for email/password, print token
    inkpot blogs                           # List your blogs
    inkpot post "Title" "Description"      # Create a blog
    inkpot edit <blog-id> -t T -d D        # Replace title and description
    inkpot rm <blog-id>                    # Delete a blog

Blog commands need a token: pass --token or export INKPOT_TOKEN.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import sys
from typing import Optional

import click
import httpx

from inkpot import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("INKPOT_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the Inkpot backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Inside an already-running loop (e.g. a test runner) the coroutine is
    offloaded to a thread with its own loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _require_token(token: Optional[str]) -> str:
    tok = token or os.environ.get("INKPOT_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set INKPOT_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return tok


def _check(r: httpx.Response) -> dict:
    """Return the JSON body, or print the API error and exit 1."""
    try:
        data = r.json()
    except ValueError:
        data = {}
    if r.is_success:
        return data

    click.secho(f"Error ({r.status_code}): {data.get('detail', r.text)}", fg="red", err=True)
    for err in data.get("errors", []):
        click.secho(f"  {err['field']}: {err['message']}", fg="red", err=True)
    sys.exit(1)


def _print_blog(blog: dict) -> None:
    click.secho(blog["title"], bold=True)
    click.echo(f"  id:      {blog['id']}")
    click.echo(f"  updated: {blog['updated_at']}")
    click.echo(f"  {blog['description']}")


def _print_token(token: str) -> None:
    click.echo(token)
    click.secho(f"\nUse it with: export INKPOT_TOKEN={token}", fg="green", err=True)


token_option = click.option("--token", envvar="INKPOT_TOKEN", help="Bearer token (or set INKPOT_TOKEN)")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="inkpot")
def main():
    """Inkpot: a minimal blogging backend client."""


# ---------------------------------------------------------------------------
# inkpot signup / signin
# ---------------------------------------------------------------------------


@main.command()
@click.option("--first-name", prompt="First name")
@click.option("--last-name", prompt="Last name")
@click.option("--email", prompt="Email")
@click.password_option()
def signup(first_name: str, last_name: str, email: str, password: str):
    """Create an account and print its token."""
    _run(_signup_impl(first_name, last_name, email, password))


async def _signup_impl(first_name: str, last_name: str, email: str, password: str):
    async with _client() as c:
        r = await c.post("/api/v1/user/signup", json={
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
        })
        data = _check(r)
    click.secho(data.get("message", "Signed up."), fg="green", err=True)
    _print_token(data["token"])


@main.command()
@click.option("--email", prompt="Email")
@click.option("--password", prompt=True, hide_input=True)
def signin(email: str, password: str):
    """Sign in and print a fresh token."""
    _run(_signin_impl(email, password))


async def _signin_impl(email: str, password: str):
    async with _client() as c:
        r = await c.post("/api/v1/user/signin", json={"email": email, "password": password})
        data = _check(r)
    _print_token(data["token"])


# ---------------------------------------------------------------------------
# inkpot blogs / post / edit / rm
# ---------------------------------------------------------------------------


@main.command()
@token_option
def blogs(token: Optional[str]):
    """List your blogs, newest first."""
    _run(_blogs_impl(_require_token(token)))


async def _blogs_impl(token: str):
    async with _client(token) as c:
        data = _check(await c.get("/api/v1/blog/myblogs"))

    items = data.get("blogs", [])
    if not items:
        click.echo("No blogs yet.")
        return
    click.secho(f"Blogs ({len(items)}):", bold=True)
    click.echo()
    for blog in items:
        _print_blog(blog)


@main.command()
@click.argument("title")
@click.argument("description")
@token_option
def post(title: str, description: str, token: Optional[str]):
    """Create a blog."""
    _run(_post_impl(title, description, _require_token(token)))


async def _post_impl(title: str, description: str, token: str):
    async with _client(token) as c:
        r = await c.post("/api/v1/blog/create", json={"title": title, "description": description})
        data = _check(r)
    click.secho(data["message"], fg="green")
    _print_blog(data["blog"])


@main.command()
@click.argument("blog_id")
@click.option("--title", "-t", required=True)
@click.option("--description", "-d", required=True)
@token_option
def edit(blog_id: str, title: str, description: str, token: Optional[str]):
    """Replace the title and description of one of your blogs."""
    _run(_edit_impl(blog_id, title, description, _require_token(token)))


async def _edit_impl(blog_id: str, title: str, description: str, token: str):
    async with _client(token) as c:
        r = await c.put(
            f"/api/v1/blog/update/{blog_id}",
            json={"title": title, "description": description},
        )
        data = _check(r)
    click.secho(data["message"], fg="green")
    _print_blog(data["blog"])


@main.command()
@click.argument("blog_id")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@token_option
def rm(blog_id: str, yes: bool, token: Optional[str]):
    """Delete one of your blogs. There is no undo."""
    tok = _require_token(token)
    if not yes:
        click.confirm(f"Delete blog {blog_id}?", abort=True)
    _run(_rm_impl(blog_id, tok))


async def _rm_impl(blog_id: str, token: str):
    async with _client(token) as c:
        data = _check(await c.delete(f"/api/v1/blog/delete/{blog_id}"))
    click.secho(data["message"], fg="green")


if __name__ == "__main__":
    main()
