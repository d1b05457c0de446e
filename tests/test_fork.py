"""Tests for the fork workflow."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from git_download_browse.config import Config
from git_download_browse.exceptions import (
    DirectoryError,
    ForkCreationFailed,
    MissingDependency,
    NoOriginRemote,
    RepoNotFound,
    UnparsableOrigin,
    WorktreeCreationFailed,
)
from git_download_browse.fork import ForkWorkflow

from fakes import FakeRunner, result, which_only


class FakeGit:
    """Answers git/gh invocations from in-memory remotes and branches."""

    def __init__(self, remotes=None, branches=(), fail=None):
        self.remotes = dict(remotes or {})
        self.branches = set(branches)
        self.fail = dict(fail or {})

    def __call__(self, cmd, cwd):
        key = tuple(cmd[:3])
        if key in self.fail:
            return result(cmd, returncode=1, stderr=self.fail[key])
        if cmd[:3] == ["git", "remote", "get-url"]:
            url = self.remotes.get(cmd[3])
            if url is None:
                return result(cmd, returncode=2, stderr=f"error: No such remote '{cmd[3]}'")
            return result(cmd, stdout=url + "\n")
        if cmd[:2] == ["git", "show-ref"]:
            branch = cmd[-1].removeprefix("refs/heads/")
            return result(cmd, returncode=0 if branch in self.branches else 1)
        if cmd[:3] == ["gh", "repo", "fork"]:
            self.remotes["fork"] = "git@github.com:me/hello.git"
            return result(cmd)
        if cmd[:3] == ["git", "worktree", "add"]:
            Path(cmd[-1]).mkdir(parents=True)
            self.branches.add(cmd[4])
            return result(cmd)
        return result(cmd)


class ForkWorkflowTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        base = Path(self._tmp.name).resolve()
        self.config = Config(repos_dir=base / "git", forked_dir=base / "forked")
        self.repo = self.config.repos_dir / "octo---hello"
        (self.repo / ".git").mkdir(parents=True)
        self.messages: list[str] = []

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _workflow(self, fake: FakeGit, *tools: str) -> tuple[ForkWorkflow, FakeRunner]:
        runner = FakeRunner(fake)
        workflow = ForkWorkflow(
            self.config,
            runner=runner,
            which=which_only(*(tools or ("git", "gh"))),
            notify=self.messages.append,
        )
        return workflow, runner

    def test_creates_fork_remote_worktree_and_pushes(self) -> None:
        fake = FakeGit(remotes={"origin": "https://github.com/octo/hello.git"})
        workflow, runner = self._workflow(fake)

        outcome = workflow.fork(self.repo)

        expected_path = self.config.forked_dir / "octo---hello-forked"
        self.assertTrue(outcome.fork_remote_created)
        self.assertTrue(outcome.pushed)
        self.assertEqual(outcome.ref.slug, "octo/hello")
        self.assertEqual(outcome.allocation.branch_name, "forked")
        self.assertEqual(outcome.allocation.worktree_path, expected_path)
        self.assertIn(
            (["gh", "repo", "fork", "octo/hello", "--clone=false", "--remote", "--remote-name", "fork"], self.repo),
            runner.calls,
        )
        self.assertIn((["git", "worktree", "add", "-b", "forked", str(expected_path)], self.repo), runner.calls)
        self.assertEqual(runner.calls[-1], (["git", "push", "--set-upstream", "fork", "forked"], expected_path))
        self.assertEqual(self.messages[0], "Fork remote added for octo/hello")

    def test_existing_fork_remote_is_reused(self) -> None:
        fake = FakeGit(remotes={"origin": "git@github.com:octo/hello.git", "fork": "git@github.com:me/hello.git"})
        workflow, runner = self._workflow(fake)

        outcome = workflow.fork(self.repo)

        self.assertFalse(outcome.fork_remote_created)
        self.assertFalse(any(cmd[0] == "gh" for cmd in runner.commands))

    def test_branch_allocation_skips_existing_branches(self) -> None:
        fake = FakeGit(branches={"forked", "forked1"})
        workflow, _ = self._workflow(fake)
        self.assertEqual(workflow.next_branch(self.repo), "forked2")

    def test_worktree_allocation_skips_existing_directories(self) -> None:
        workflow, _ = self._workflow(FakeGit())
        forked = self.config.forked_dir
        (forked / "octo---hello-forked").mkdir(parents=True)
        self.assertEqual(workflow.next_worktree_path(self.repo, "forked"), forked / "octo---hello-forked-1")
        (forked / "octo---hello-forked-1").mkdir()
        self.assertEqual(workflow.next_worktree_path(self.repo, "forked"), forked / "octo---hello-forked-2")

    def test_repeated_forks_allocate_fresh_names(self) -> None:
        fake = FakeGit(remotes={"origin": "https://github.com/octo/hello"})
        workflow, _ = self._workflow(fake)
        first = workflow.fork(self.repo).allocation
        second = workflow.fork(self.repo).allocation
        self.assertEqual(first.branch_name, "forked")
        self.assertEqual(second.branch_name, "forked1")
        self.assertEqual(second.worktree_path.name, "octo---hello-forked1")

    def test_push_failure_is_only_a_warning(self) -> None:
        fake = FakeGit(
            remotes={"origin": "https://github.com/octo/hello"},
            fail={("git", "push", "--set-upstream"): "remote: Permission denied"},
        )
        workflow, _ = self._workflow(fake)

        outcome = workflow.fork(self.repo)

        self.assertFalse(outcome.pushed)
        self.assertEqual(outcome.push_error, "remote: Permission denied")
        self.assertTrue(outcome.allocation.worktree_path.exists())

    def test_missing_tools(self) -> None:
        for tools in (("gh",), ("git",)):
            with self.subTest(tools=tools):
                workflow, runner = self._workflow(FakeGit(), *tools)
                with self.assertRaises(MissingDependency):
                    workflow.fork(self.repo)
                self.assertEqual(runner.calls, [])

    def test_tools_are_checked_before_resolving_the_target(self) -> None:
        workflow, runner = self._workflow(FakeGit(), "git")
        with self.assertRaises(MissingDependency):
            workflow.run("someone/unknown")
        self.assertEqual(runner.calls, [])

    def test_run_resolves_reference_and_forks(self) -> None:
        fake = FakeGit(remotes={"origin": "https://github.com/octo/hello"})
        workflow, _ = self._workflow(fake)
        outcome = workflow.run("octo/hello")
        self.assertEqual(outcome.allocation.worktree_path, self.config.forked_dir / "octo---hello-forked")

    def test_forked_dir_that_is_a_file_is_reported(self) -> None:
        self.config.forked_dir.write_text("not a directory", encoding="utf-8")
        fake = FakeGit(remotes={"origin": "https://github.com/octo/hello", "fork": "git@github.com:me/hello.git"})
        workflow, runner = self._workflow(fake)
        with self.assertRaises(DirectoryError):
            workflow.fork(self.repo)
        self.assertFalse(any(cmd[:3] == ["git", "worktree", "add"] for cmd in runner.commands))

    def test_missing_origin(self) -> None:
        workflow, _ = self._workflow(FakeGit())
        with self.assertRaises(NoOriginRemote):
            workflow.fork(self.repo)

    def test_unparsable_origin(self) -> None:
        workflow, _ = self._workflow(FakeGit(remotes={"origin": "https://gitlab.com/octo/hello.git"}))
        with self.assertRaises(UnparsableOrigin):
            workflow.fork(self.repo)

    def test_fork_creation_failure(self) -> None:
        fake = FakeGit(
            remotes={"origin": "https://github.com/octo/hello"},
            fail={("gh", "repo", "fork"): "HTTP 403: Resource not accessible"},
        )
        workflow, runner = self._workflow(fake)
        with self.assertRaises(ForkCreationFailed) as ctx:
            workflow.fork(self.repo)
        self.assertEqual(str(ctx.exception), "HTTP 403: Resource not accessible")
        self.assertFalse(any(cmd[:3] == ["git", "worktree", "add"] for cmd in runner.commands))

    def test_worktree_creation_failure(self) -> None:
        fake = FakeGit(
            remotes={"origin": "https://github.com/octo/hello", "fork": "git@github.com:me/hello.git"},
            fail={("git", "worktree", "add"): ""},
        )
        workflow, runner = self._workflow(fake)
        with self.assertRaises(WorktreeCreationFailed) as ctx:
            workflow.fork(self.repo)
        self.assertEqual(str(ctx.exception), "Failed to create worktree")
        self.assertFalse(any(cmd[:2] == ["git", "push"] for cmd in runner.commands))


class ResolveRepoPathTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        base = Path(self._tmp.name).resolve()
        self.config = Config(repos_dir=base / "git", forked_dir=base / "forked")
        self.repo = self.config.repos_dir / "octo---hello"
        (self.repo / ".git").mkdir(parents=True)
        (self.repo / "src" / "pkg").mkdir(parents=True)
        self.workflow = ForkWorkflow(self.config, runner=FakeRunner(), which=which_only("git", "gh"))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_directory_argument_walks_upward(self) -> None:
        self.assertEqual(self.workflow.resolve_repo_path(str(self.repo / "src" / "pkg")), self.repo)

    def test_reference_argument_maps_to_clone(self) -> None:
        self.assertEqual(self.workflow.resolve_repo_path("octo/hello"), self.repo)
        self.assertEqual(self.workflow.resolve_repo_path("git@github.com:octo/hello.git"), self.repo)

    def test_defaults_to_current_directory(self) -> None:
        self.assertEqual(self.workflow.resolve_repo_path(None, cwd=self.repo / "src"), self.repo)

    def test_gitdir_file_marks_worktree_root(self) -> None:
        worktree = self.config.forked_dir / "octo---hello-forked"
        worktree.mkdir(parents=True)
        (worktree / ".git").write_text("gitdir: /elsewhere\n", encoding="utf-8")
        self.assertEqual(self.workflow.resolve_repo_path(str(worktree)), worktree)

    def test_unknown_targets(self) -> None:
        for target in ("someone/else", "not a reference"):
            with self.subTest(target=target):
                with self.assertRaises(RepoNotFound):
                    self.workflow.resolve_repo_path(target)


if __name__ == "__main__":
    unittest.main()
