"""CLI interface using typer."""

import asyncio
import logging
import sys

import httpx
import typer

from .errors import FetchError
from .handle import fetch

app = typer.Typer(
    name="streamget",
    help="Fetch a URL following redirects and decoding the body",
    no_args_is_help=True,
)


def _parse_header(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise typer.BadParameter(f"expected 'Name: value', got {raw!r}")
    return name.strip(), value.strip()


async def _get(
    url: str,
    out,
    method: str,
    data: str | None,
    headers: list[tuple[str, str]],
    user: str | None,
    agent: str | None,
    follow: bool,
    raw: bool,
    cookies: bool,
    include: bool,
) -> None:
    handle = fetch(url).method(method).follow_redirects(follow).inflate(not raw)
    for name, value in headers:
        handle.header(name, value)
    if data is not None:
        handle.send(data)
    if user:
        handle.auth(user)
    if agent:
        handle.user_agent(agent)
    if cookies:
        handle.cookies()
    if include:
        handle.on_response(_print_response)

    async for chunk in handle:
        out.write(chunk)
    out.flush()


def _print_response(response) -> None:
    typer.echo(f"{response.http_version} {response.status}", err=True)
    for name, value in response.headers.items():
        typer.echo(f"{name}: {value}", err=True)
    typer.echo("", err=True)


@app.command()
def get(
    url: str = typer.Argument(..., help="URL to fetch"),
    output: str = typer.Option(None, "-o", "--output", help="Write body to file"),
    method: str = typer.Option("GET", "-X", "--request", help="HTTP method"),
    data: str = typer.Option(None, "-d", "--data", help="Request body"),
    header: list[str] = typer.Option([], "-H", "--header", help="Extra header 'Name: value'"),
    user: str = typer.Option(None, "-u", "--user", help="Credentials user[:password]"),
    agent: str = typer.Option(None, "-A", "--user-agent", help="User-Agent header"),
    follow: bool = typer.Option(True, "--follow/--no-follow", help="Follow redirects"),
    raw: bool = typer.Option(False, "--raw", help="Do not decompress the body"),
    cookies: bool = typer.Option(False, "--cookies", help="Keep cookies across redirects"),
    include: bool = typer.Option(False, "-i", "--include", help="Print status and headers to stderr"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging"),
):
    """Fetch a single URL and write the decoded body."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    headers = [_parse_header(h) for h in header]

    try:
        if output:
            with open(output, "wb") as f:
                asyncio.run(_get(url, f, method, data, headers, user, agent, follow, raw, cookies, include))
            typer.echo(f"Saved to {output}", err=True)
        else:
            asyncio.run(_get(url, sys.stdout.buffer, method, data, headers, user, agent, follow, raw, cookies, include))
    except (FetchError, httpx.HTTPError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)


@app.command()
def version():
    """Show version."""
    from . import __version__

    typer.echo(f"streamget {__version__}")


if __name__ == "__main__":
    app()
