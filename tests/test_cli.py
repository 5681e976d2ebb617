"""End-to-end command tests through main() with a mocked API session."""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from conftest import API, FakeWorkingCopy, make_response, page, pr_payload, route

from bbcli.app import AppContext
from bbcli.cli.browse import browse_url
from bbcli.cli.completion import command_tree
from bbcli.config import Config, EnvSettings, HostsConfig, load_config
from bbcli.errors import LOGIN_HINT
from bbcli.main import build_parser, main
from bbcli.models import RepoRef


def _out(app: AppContext) -> str:
    return app.streams.stdout.getvalue()


def _err(app: AppContext) -> str:
    return app.streams.stderr.getvalue()


class TestScenarios:
    def test_list_merged_with_limit(self, app) -> None:
        values = [pr_payload(10, "MERGED", title="Tenth"), pr_payload(9, "MERGED", title="Ninth")]
        reply = make_response(payload=page(values, next_url=f"{API}/repositories/acme/widgets/pullrequests?page=2"))
        with patch.object(app.client._session, "request", return_value=reply) as req:
            code = main(["pr", "list", "--state", "MERGED", "--limit", "2"], app=app)

        assert code == 0
        req.assert_called_once()
        assert req.call_args[0][1] == f"{API}/repositories/acme/widgets/pullrequests"
        params = req.call_args[1]["params"]
        assert params["state"] == "MERGED"
        assert params["pagelen"] >= 2
        lines = _out(app).splitlines()
        assert lines[0].split() == ["ID", "TITLE", "BRANCH", "AUTHOR", "STATUS"]
        assert lines[1].startswith("#10")
        assert lines[2].startswith("#9")
        assert len(lines) == 3

    def test_view_current_branch(self, app) -> None:
        routes = {
            ("GET", "/pullrequests"): make_response(payload=page([pr_payload(42, title="Answer")])),
            ("GET", "/pullrequests/42"): make_response(payload=pr_payload(42, title="Answer")),
        }
        with patch.object(app.client._session, "request", side_effect=route(routes)):
            code = main(["pr", "view"], app=app)
        assert code == 0
        assert _out(app).startswith("Title: Answer")

    def test_view_current_branch_without_pr(self, app) -> None:
        with patch.object(app.client._session, "request", return_value=make_response(payload=page([]))):
            code = main(["pr", "view"], app=app)
        assert code == 1
        assert '✗ no open pull request found for branch "feature/x"' in _err(app)

    def test_checkout_existing_branch(self, app, working_copy) -> None:
        working_copy.local_branches.add("feature/y")
        with patch.object(app.client._session, "request", return_value=make_response(payload=pr_payload(17, source="feature/y"))):
            code = main(["pr", "checkout", "17"], app=app)
        assert code == 1
        assert "branch 'feature/y' already exists locally. Use --force to overwrite" in _err(app)
        assert not [c for c in working_copy.calls if c[0] == "fetch"]

    def test_merge_squash(self, app) -> None:
        routes = {
            ("GET", "/pullrequests/3"): make_response(payload=pr_payload(3)),
            ("POST", "/pullrequests/3/merge"): make_response(payload=pr_payload(3, "MERGED")),
        }
        with patch.object(app.client._session, "request", side_effect=route(routes)) as req:
            code = main(["pr", "merge", "3", "--squash", "--yes"], app=app)
        assert code == 0
        method, url = req.call_args[0]
        assert (method, url) == ("POST", f"{API}/repositories/acme/widgets/pullrequests/3/merge")
        assert req.call_args[1]["json"] == {"merge_strategy": "squash"}

    def test_merge_already_merged(self, app) -> None:
        with patch.object(app.client._session, "request", return_value=make_response(payload=pr_payload(3, "MERGED"))) as req:
            code = main(["pr", "merge", "3", "--squash", "--yes"], app=app)
        assert code == 1
        assert "pull request #3 is not open (state: MERGED)" in _err(app)
        assert [c[0][0] for c in req.call_args_list] == ["GET"]

    def test_create_from_main(self, app, working_copy) -> None:
        working_copy.branch = "main"
        with patch.object(app.client._session, "request") as req:
            code = main(["pr", "create", "--title", "x"], app=app)
        assert code == 1
        assert 'cannot create a pull request from branch "main"' in _err(app)
        req.assert_not_called()

    def test_branch_delete_non_interactive(self, app) -> None:
        with patch.object(app.client._session, "request") as req:
            code = main(["branch", "delete", "feature/z"], app=app)
        assert code == 1
        err = _err(app)
        assert "cannot confirm deletion in non-interactive mode" in err
        assert "Use --force flag to skip confirmation" in err
        req.assert_not_called()


class TestOutput:
    def test_list_json(self, app) -> None:
        with patch.object(app.client._session, "request", return_value=make_response(payload=page([pr_payload(1)]))):
            main(["pr", "list", "--json"], app=app)
        out = _out(app)
        assert out.startswith('[{"id":1,"title":"Pull request 1"')
        assert '"source_branch":"feature/x"' in out
        assert '"url":"https://bitbucket.org/acme/widgets/pull-requests/1"' in out

    def test_empty_list(self, app) -> None:
        with patch.object(app.client._session, "request", return_value=make_response(payload=page([]))):
            main(["pr", "list", "-R", "team/thing"], app=app)
        assert _out(app) == "No open pull requests found in team/thing\n"

    def test_checks_table(self, app) -> None:
        statuses = [
            {"key": "build", "name": "Build", "state": "SUCCESSFUL", "description": "Passed"},
            {"key": "lint", "name": "Lint", "state": "FAILED", "description": "2 errors"},
        ]
        with patch.object(app.client._session, "request", return_value=make_response(payload=page(statuses))):
            code = main(["pr", "checks", "4"], app=app)
        assert code == 0
        lines = _out(app).splitlines()
        assert lines[0].split() == ["STATUS", "NAME", "DESCRIPTION"]
        assert lines[1].startswith("✓ pass")
        assert lines[2].startswith("✗ fail")

    def test_diff_plain(self, app) -> None:
        routes = {
            ("GET", "/pullrequests/4"): make_response(payload=pr_payload(4)),
            ("GET", "/pullrequests/4/diff"): make_response(text="diff --git a/f b/f\n+new"),
        }
        with patch.object(app.client._session, "request", side_effect=route(routes)):
            main(["pr", "diff", "4"], app=app)
        assert _out(app) == "diff --git a/f b/f\n+new\n"

    def test_unauthorized_shows_hint(self, app) -> None:
        with patch.object(app.client._session, "request", return_value=make_response(401, payload={})):
            code = main(["pr", "view", "4"], app=app)
        assert code == 1
        assert "API error 401" in _err(app)


class TestContext:
    def _bare_app(self, streams, working_copy) -> AppContext:
        return AppContext(
            settings=EnvSettings(bb_token=None, bitbucket_token=None),
            config=Config(),
            hosts=HostsConfig(),
            streams=streams,
            working_copy=working_copy,
            editor=Mock(),
            browser=Mock(),
        )

    def test_not_logged_in(self, streams, working_copy) -> None:
        app = self._bare_app(streams, working_copy)
        assert main(["pr", "view", "4"], app=app) == 1
        assert "not logged in to bitbucket.org" in _err(app)
        assert LOGIN_HINT in _err(app)

    def test_local_validation_needs_no_credentials(self, streams, working_copy) -> None:
        app = self._bare_app(streams, working_copy)
        assert main(["pr", "list", "--state", "bogus"], app=app) == 1
        assert "invalid state: bogus" in _err(app)
        assert "not logged in" not in _err(app)

    def test_bad_repo_flag(self, app) -> None:
        with patch.object(app.client._session, "request") as req:
            assert main(["pr", "list", "-R", "widgets"], app=app) == 1
        assert "invalid repository format: widgets (expected workspace/repo)" in _err(app)
        req.assert_not_called()

    def test_no_remote_hint(self, app) -> None:
        app.working_copy = FakeWorkingCopy(remotes=[])
        assert main(["pr", "list"], app=app) == 1
        assert "no Bitbucket remotes found" in _err(app)
        assert "Use --repo WORKSPACE/REPO to specify" in _err(app)


class TestBrowse:
    REPO = RepoRef(workspace="acme", slug="widgets")

    @pytest.mark.parametrize(
        "kwargs,expected",
        [
            ({}, "https://bitbucket.org/acme/widgets"),
            ({"prs": True}, "https://bitbucket.org/acme/widgets/pull-requests"),
            ({"settings": True}, "https://bitbucket.org/acme/widgets/admin"),
            ({"commit": "abc123"}, "https://bitbucket.org/acme/widgets/commits/abc123"),
            ({"branch": "dev"}, "https://bitbucket.org/acme/widgets/src/dev"),
            ({"path": "/docs/README.md", "branch": "dev"}, "https://bitbucket.org/acme/widgets/src/dev/docs/README.md"),
            ({"path": "setup.cfg", "current_branch": "feature/x"}, "https://bitbucket.org/acme/widgets/src/feature/x/setup.cfg"),
        ],
    )
    def test_browse_url(self, kwargs, expected: str) -> None:
        assert browse_url(self.REPO, **kwargs) == expected

    def test_no_browser_prints(self, app) -> None:
        assert main(["browse", "README.md", "-n"], app=app) == 0
        assert _out(app) == "https://bitbucket.org/acme/widgets/src/feature/x/README.md\n"
        app.browser.open.assert_not_called()

    def test_opens_browser(self, app) -> None:
        assert main(["browse", "--prs"], app=app) == 0
        app.browser.open.assert_called_once_with("https://bitbucket.org/acme/widgets/pull-requests")


class TestConfigCommand:
    def test_set_then_get(self, app, tmp_path: Path) -> None:
        app.settings = EnvSettings(bb_config_dir=str(tmp_path))
        assert main(["config", "set", "git_protocol", "https"], app=app) == 0
        assert load_config(settings=app.settings).git_protocol == "https"
        assert main(["config", "get", "git_protocol"], app=app) == 0
        assert _out(app).splitlines()[-1] == "https"

    def test_invalid_value(self, app, tmp_path: Path) -> None:
        app.settings = EnvSettings(bb_config_dir=str(tmp_path))
        assert main(["config", "set", "http_timeout", "0"], app=app) == 1
        assert "http_timeout must be at least 1 second" in _err(app)
        assert not (tmp_path / "config.yml").exists()

    def test_list(self, app) -> None:
        main(["config", "list"], app=app)
        assert "git_protocol=ssh" in _out(app).splitlines()


class TestCompletion:
    def test_tree_includes_nested_commands(self) -> None:
        tree = command_tree(build_parser())
        assert {"pr", "pr list", "pr merge", "branch delete", "project create", "config set"} <= set(tree)

    def test_bash_script(self, app) -> None:
        assert main(["completion", "bash"], app=app) == 0
        script = _out(app)
        assert "complete -F _bb_completion bb" in script
        assert '"pr") opts="' in script
        pr_line = next(line for line in script.splitlines() if line.strip().startswith('"pr")'))
        assert "project" not in pr_line
        assert "merge" in pr_line

    def test_zsh_script(self, app) -> None:
        main(["completion", "zsh"], app=app)
        assert _out(app).startswith("autoload -U +X bashcompinit && bashcompinit")


class TestBranchAndProjectCommands:
    def test_branch_create_json(self, app) -> None:
        routes = {
            ("GET", "/refs/branches/main"): make_response(payload={"name": "main", "target": {"hash": "cafe1234"}}),
            ("POST", "/refs/branches"): make_response(
                201, payload={"name": "feature/new", "target": {"hash": "cafe1234", "message": "Base\n"}}
            ),
        }
        with patch.object(app.client._session, "request", side_effect=route(routes)) as req:
            code = main(["branch", "create", "feature/new", "--target", "main", "--json"], app=app)
        assert code == 0
        assert req.call_args[1]["json"] == {"name": "feature/new", "target": {"hash": "cafe1234"}}
        assert _out(app).splitlines()[-1] == '{"name":"feature/new","commit":"cafe1234","message":"Base"}'

    def test_branch_create_needs_target(self, app) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["branch", "create", "feature/new"], app=app)
        assert exc_info.value.code == 2

    def test_project_view_positional_key(self, app) -> None:
        reply = {"key": "PROJ", "name": "Project", "is_private": False}
        with patch.object(app.client._session, "request", return_value=make_response(payload=reply)) as req:
            code = main(["project", "view", "proj", "-w", "acme"], app=app)
        assert code == 0
        assert req.call_args[0][1] == f"{API}/workspaces/acme/projects/PROJ"
        assert _out(app).startswith("Project (PROJ)")

    def test_project_view_key_flag(self, app) -> None:
        reply = {"key": "PROJ", "name": "Project"}
        with patch.object(app.client._session, "request", return_value=make_response(payload=reply)) as req:
            assert main(["project", "view", "-k", "PROJ", "-w", "acme"], app=app) == 0
        assert req.call_args[0][1].endswith("/projects/PROJ")

    def test_project_view_web(self, app) -> None:
        reply = {"key": "PROJ", "name": "Project", "links": {"html": {"href": "https://bitbucket.org/acme/workspace/projects/PROJ"}}}
        with patch.object(app.client._session, "request", return_value=make_response(payload=reply)):
            assert main(["project", "view", "PROJ", "-w", "acme", "--web"], app=app) == 0
        app.browser.open.assert_called_once_with("https://bitbucket.org/acme/workspace/projects/PROJ")

    @pytest.mark.parametrize("flag", ["-l", "-L", "--limit"])
    def test_limit_flags(self, app, flag: str) -> None:
        with patch.object(app.client._session, "request", return_value=make_response(payload=page([]))) as req:
            assert main(["branch", "list", flag, "3"], app=app) == 0
        assert req.call_args[1]["params"]["pagelen"] == 3
