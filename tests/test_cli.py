from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from click.testing import CliRunner

from fakes import FakeRepository, Prompter, RecordingTrigger
from pbuild.app import App
from pbuild.cli import main
from pbuild.models import BuildConfig, BuildResult, CommitComparison

GIT_CONFIG = {
    "pbuild.api-key": "local-key",
    "pbuild.account": "acme",
    "pbuild.project": "widgets",
    "pbuild.web-url": "https://ci.example.test",
    "user.name": "Test User",
    "user.email": "test@example.com",
}


class Harness:
    def __init__(self, repo: FakeRepository, ask: Prompter, result: BuildResult) -> None:
        self.repo = repo
        self.ask = ask
        self.result = result
        self.triggers: list[RecordingTrigger] = []

    def _trigger(self, config: BuildConfig) -> RecordingTrigger:
        trigger = RecordingTrigger(config, self.result)
        self.triggers.append(trigger)
        return trigger

    def factory(self) -> Callable[..., App]:
        def make_app(cwd: Path, overrides: dict[str, str | None]) -> App:
            return App(
                cwd,
                overrides=overrides,
                ask=self.ask,
                repo=self.repo,  # type: ignore[arg-type]
                trigger_factory=self._trigger,  # type: ignore[arg-type]
            )

        return make_app

    @property
    def requests(self) -> list:
        return [request for trigger in self.triggers for request in trigger.requests]


def _invoke(harness: Harness, args: list[str] | None = None):
    return CliRunner().invoke(main, args or [], obj=harness.factory())


def _repo(**kwargs: object) -> FakeRepository:
    return FakeRepository(config=dict(GIT_CONFIG), **kwargs)  # type: ignore[arg-type]


def test_success_prints_build_url() -> None:
    harness = Harness(_repo(upstream="origin/team/feature"), Prompter(), BuildResult(number=1234))
    result = _invoke(harness)
    assert result.exit_code == 0, result.output
    assert "https://ci.example.test/acme/widgets/builds/1234" in result.output
    (request,) = harness.requests
    assert request.branch == "team/feature"
    assert request.commit == harness.repo.revision
    assert request.message == "Personal build by Test User"
    assert request.user_email == "test@example.com"


def test_detached_head_exits_without_prompt() -> None:
    harness = Harness(_repo(branch=None), Prompter(), BuildResult(number=1))
    result = _invoke(harness)
    assert result.exit_code == 1
    assert "detached HEAD" in result.output
    assert harness.ask.prompts == []
    assert harness.requests == []


def test_declined_prompt_sends_nothing() -> None:
    harness = Harness(_repo(comparison=CommitComparison.BEHIND), Prompter(False), BuildResult(number=1))
    result = _invoke(harness)
    assert result.exit_code == 1
    assert "Aborted." in result.output
    assert harness.requests == []


def test_dirty_tree_prompt_comes_before_request() -> None:
    harness = Harness(_repo(dirty=True, status=" M setup.cfg"), Prompter(False), BuildResult(number=1))
    result = _invoke(harness)
    assert result.exit_code == 1
    assert " M setup.cfg" in result.output
    assert harness.requests == []


def test_missing_config_exits_with_commands() -> None:
    repo = FakeRepository(config={"user.name": "Test User"})
    harness = Harness(repo, Prompter(), BuildResult(number=1))
    result = _invoke(harness)
    assert result.exit_code == 1
    assert "git config --global pbuild.api-key" in result.output
    assert harness.requests == []


def test_cli_options_override_git_config() -> None:
    harness = Harness(_repo(), Prompter(), BuildResult(number=9))
    result = _invoke(harness, ["--account", "other", "--project", "gadgets"])
    assert result.exit_code == 0, result.output
    assert "https://ci.example.test/other/gadgets/builds/9" in result.output
    assert harness.triggers[0].config.account == "other"


def test_rejected_api_key_shows_settings() -> None:
    harness = Harness(_repo(), Prompter(), BuildResult(error='{"error": "Invalid API key"}'))
    result = _invoke(harness)
    assert result.exit_code == 1
    assert "https://ci.example.test/user/api-access-tokens" in result.output
    assert "local-key" in result.output
    assert '{"error": "Invalid API key"}' in result.output


def test_generic_failure_echoes_payload() -> None:
    harness = Harness(_repo(), Prompter(), BuildResult(error='{"error": "Project not found"}'))
    result = _invoke(harness)
    assert result.exit_code == 1
    assert '{"error": "Project not found"}' in result.output


def test_outside_repository_exits(tmp_path: Path) -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(
            main,
            ["--api-key", "k", "--account", "acme", "--project", "widgets"],
            env={"GIT_CEILING_DIRECTORIES": str(tmp_path)},
        )
    assert result.exit_code == 1
    assert "Not inside a git repository" in result.output
