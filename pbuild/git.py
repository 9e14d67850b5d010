from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .errors import PbuildError
from .models import CommitComparison

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"


class GitError(PbuildError):
    pass


def _run_cmd(args: list[str], cwd: Path | None = None) -> str:
    logger.debug("running %s", " ".join(args))
    result = subprocess.run(
        args,
        cwd=str(cwd) if cwd else None,
        check=False,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise GitError(result.stderr.strip() or result.stdout.strip() or f"{args[0]} failed")
    return result.stdout.strip()


def _run_git(args: list[str], cwd: Path | None = None) -> str:
    return _run_cmd(["git", *args], cwd=cwd)


def _try_run_git(args: list[str], cwd: Path | None = None) -> str | None:
    try:
        return _run_git(args, cwd=cwd)
    except GitError:
        return None


def get_repo_root(cwd: Path) -> Path | None:
    try:
        top = _run_git(["-C", str(cwd), "rev-parse", "--show-toplevel"])
    except GitError:
        return None
    return Path(top)


def strip_remote(ref: str) -> str:
    """Drop the remote name: ``origin/team/x`` -> ``team/x``."""
    _, sep, branch = ref.partition("/")
    return branch if sep else ref


class Repository:
    """Read-only queries against one working tree.

    Nothing is cached; every call asks git again.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def _git(self, *args: str) -> str:
        return _run_git(list(args), cwd=self.root)

    def _try_git(self, *args: str) -> str | None:
        return _try_run_git(list(args), cwd=self.root)

    def current_revision(self) -> str:
        return self._git("rev-parse", "HEAD")

    def current_branch(self) -> str | None:
        return self._try_git("symbolic-ref", "--quiet", "--short", "HEAD") or None

    def upstream_ref(self) -> str | None:
        ref = self._try_git("rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}")
        return ref or None

    def upstream_branch(self) -> str | None:
        ref = self.upstream_ref()
        if ref is None:
            return None
        return strip_remote(ref)

    def remote_candidate_branch(self) -> str | None:
        branch = self.current_branch()
        if branch is None:
            return None
        return f"{DEFAULT_REMOTE}/{branch}"

    def resolve_ref(self, ref: str) -> str | None:
        return self._try_git("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}")

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        return self._try_git("merge-base", "--is-ancestor", ancestor, descendant) is not None

    def compare_to_remote_candidate(self) -> CommitComparison:
        candidate = self.remote_candidate_branch()
        if candidate is None:
            return CommitComparison.UNKNOWN
        remote_sha = self.resolve_ref(candidate)
        if remote_sha is None:
            return CommitComparison.UNKNOWN
        local_sha = self.current_revision()
        if remote_sha == local_sha:
            return CommitComparison.IDENTICAL
        if self.is_ancestor(remote_sha, local_sha):
            return CommitComparison.BEHIND
        return CommitComparison.UNKNOWN

    def is_commit_reachable_from(self, remote_ref: str) -> bool:
        missing = self._try_git("rev-list", f"{remote_ref}..HEAD")
        if missing is None:
            return False
        return not missing

    def is_working_tree_dirty(self) -> bool:
        return bool(self._git("status", "--porcelain", "--untracked-files=no"))

    def working_tree_status(self) -> str:
        return self._git("status", "--short", "--untracked-files=no")

    def config_value(self, key: str) -> str | None:
        return self._try_git("config", "--get", key) or None

    def user_name(self) -> str:
        return self.config_value("user.name") or ""

    def user_email(self) -> str:
        return self.config_value("user.email") or ""
