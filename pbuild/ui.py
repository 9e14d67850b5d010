from __future__ import annotations

import click
import questionary

from .models import BuildConfig


def confirm(text: str) -> bool:
    # auto_enter answers on a single y/n keystroke.
    return bool(questionary.confirm(text, default=False, auto_enter=True).unsafe_ask())


def say(text: str) -> None:
    click.echo(text)


def build_url(config: BuildConfig, number: int) -> str:
    return f"{config.web_url}/{config.account}/{config.project}/builds/{number}"


def credentials_settings_url(config: BuildConfig) -> str:
    return f"{config.web_url}/user/api-access-tokens"


def credentials_help(config: BuildConfig) -> str:
    return "\n".join(
        [
            "Your API key was rejected by the build service.",
            f"Your configured API key is: {config.api_key}",
            f"Check it against {credentials_settings_url(config)} and update it with:",
            "",
            "  git config --global pbuild.api-key <your-api-key>",
        ]
    )


def format_success(config: BuildConfig, number: int) -> str:
    return f"Build #{number} started: {build_url(config, number)}"
