"""Safety checks that run before a build is triggered.

The checks run in order and stop at the first failure:

1. HEAD must be on a branch.
2. The remote branch to build is picked: the configured upstream, or
   ``origin/<branch>`` when it matches or trails local HEAD.
3. HEAD must be visible on that remote branch.
4. The working tree should be clean.

Steps 2 (trailing remote), 3 and 4 can be overridden by answering "yes" at a
prompt, because git only sees the refs it has fetched and may be wrong.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from .errors import Declined, RepositoryStateInvalid
from .git import DEFAULT_REMOTE
from .models import CommitComparison, GateResult

logger = logging.getLogger(__name__)


class BranchState(Protocol):
    def current_revision(self) -> str: ...

    def current_branch(self) -> str | None: ...

    def upstream_ref(self) -> str | None: ...

    def upstream_branch(self) -> str | None: ...

    def remote_candidate_branch(self) -> str | None: ...

    def compare_to_remote_candidate(self) -> CommitComparison: ...

    def is_commit_reachable_from(self, remote_ref: str) -> bool: ...

    def is_working_tree_dirty(self) -> bool: ...

    def working_tree_status(self) -> str: ...


class SafetyGate:
    def __init__(
        self,
        repo: BranchState,
        ask: Callable[[str], bool],
        echo: Callable[[str], None],
    ) -> None:
        self.repo = repo
        self.ask = ask
        self.echo = echo

    def run(self) -> GateResult:
        branch = self.check_on_branch()
        build_branch, remote_ref = self.choose_build_branch(branch)
        self.check_commit_visible(remote_ref)
        self.check_clean_tree()
        return GateResult(branch=build_branch, commit=self.repo.current_revision())

    def _confirm(self, prompt: str) -> None:
        if not self.ask(prompt):
            raise Declined()

    def check_on_branch(self) -> str:
        branch = self.repo.current_branch()
        if branch is None:
            raise RepositoryStateInvalid(
                "You're not on a branch (detached HEAD).\n"
                "Check out the branch you want to build, for example:\n\n"
                "  git checkout -b my-branch"
            )
        return branch

    def choose_build_branch(self, branch: str) -> tuple[str, str]:
        """Return the branch name to build and the remote ref it lives at."""
        upstream = self.repo.upstream_ref()
        if upstream is not None:
            build_branch = self.repo.upstream_branch() or branch
            self.echo(f"Using upstream {upstream}")
            logger.debug("build branch %s from upstream %s", build_branch, upstream)
            return build_branch, upstream

        candidate = self.repo.remote_candidate_branch() or f"{DEFAULT_REMOTE}/{branch}"
        comparison = self.repo.compare_to_remote_candidate()
        logger.debug("%s compared to HEAD: %s", candidate, comparison.value)
        if comparison is CommitComparison.IDENTICAL:
            self.echo(f"No upstream configured, {candidate} matches HEAD")
            return branch, candidate
        if comparison is CommitComparison.BEHIND:
            self.echo(f"No upstream configured, {candidate} is behind your local branch.")
            self._confirm(f"{candidate} is behind. Try anyway?")
            return branch, candidate
        raise RepositoryStateInvalid(
            f"Can't find {candidate} and no upstream is configured.\n"
            "Push your branch first:\n\n"
            f"  git push -u {DEFAULT_REMOTE} {branch}"
        )

    def check_commit_visible(self, remote_ref: str) -> None:
        if self.repo.is_commit_reachable_from(remote_ref):
            return
        self.echo(f"HEAD is not on {remote_ref}. Did you push it?")
        remote, _, _ = remote_ref.partition("/")
        self._confirm(f"Can't see this commit on {remote}. Try anyway?")

    def check_clean_tree(self) -> None:
        if not self.repo.is_working_tree_dirty():
            return
        self.echo("Your working tree has uncommitted changes:")
        self.echo(self.repo.working_tree_status())
        self._confirm("Working tree is dirty. Try anyway?")
