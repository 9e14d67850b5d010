from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from . import git, ui
from .config import resolve_config
from .errors import CredentialsInvalid, RemoteTriggerFailure
from .gate import SafetyGate
from .models import BuildConfig, BuildRequest
from .trigger import BuildTrigger, personal_build_message

logger = logging.getLogger(__name__)


class App:
    def __init__(
        self,
        cwd: Path,
        overrides: Mapping[str, str | None] | None = None,
        ask: Callable[[str], bool] = ui.confirm,
        echo: Callable[[str], None] = ui.say,
        repo: git.Repository | None = None,
        trigger_factory: Callable[[BuildConfig], BuildTrigger] = BuildTrigger,
    ) -> None:
        if repo is None:
            repo_root = git.get_repo_root(cwd)
            if repo_root is None:
                raise git.GitError("Not inside a git repository")
            repo = git.Repository(repo_root)
        self.repo = repo
        self.config = resolve_config(overrides or {}, repo.config_value)
        self.ask = ask
        self.echo = echo
        self.trigger_factory = trigger_factory

    def run(self) -> int:
        """Check the repository, trigger the build and return its number."""
        gate = SafetyGate(self.repo, ask=self.ask, echo=self.echo)
        decision = gate.run()
        request = BuildRequest(
            branch=decision.branch,
            commit=decision.commit,
            message=personal_build_message(self.repo.user_name()),
            user_name=self.repo.user_name(),
            user_email=self.repo.user_email(),
        )

        self.echo(f"Triggering build of {request.branch} at {request.commit[:10]}...")
        result = self.trigger_factory(self.config).submit(request)
        if result.credentials_invalid:
            message = f"{ui.credentials_help(self.config)}\n\n{result.error}"
            raise CredentialsInvalid(message, result)
        if result.number is None:
            raise RemoteTriggerFailure(f"Build failed to start:\n{result.error}", result)

        logger.debug("build %s created", result.number)
        self.echo(ui.format_success(self.config, result.number))
        return result.number
