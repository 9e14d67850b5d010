from __future__ import annotations

import logging
from pathlib import Path

import click

from .app import App
from .errors import PbuildError


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="pbuild")
@click.option("--api-key", envvar="PBUILD_API_KEY", help="API key (overrides git config pbuild.api-key).")
@click.option("--account", envvar="PBUILD_ACCOUNT", help="Account name (overrides pbuild.account).")
@click.option("--project", envvar="PBUILD_PROJECT", help="Project name (overrides pbuild.project).")
@click.option("--api-url", envvar="PBUILD_API_URL", hidden=True)
@click.option("--web-url", envvar="PBUILD_WEB_URL", hidden=True)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(
    ctx: click.Context,
    api_key: str | None,
    account: str | None,
    project: str | None,
    api_url: str | None,
    web_url: str | None,
    debug: bool,
) -> None:
    """pbuild: trigger a personal CI build of the current branch.

    Checks that you're on a branch, that it has been pushed and that the
    working tree is clean, asking before going ahead when it isn't sure.
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    overrides = {
        "api_key": api_key,
        "account": account,
        "project": project,
        "api_url": api_url,
        "web_url": web_url,
    }
    # Tests pass their own App factory through ctx.obj.
    make_app = ctx.obj or App
    try:
        make_app(Path.cwd(), overrides=overrides).run()
    except PbuildError as exc:
        click.echo(str(exc), err=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
