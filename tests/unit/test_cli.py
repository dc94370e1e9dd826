"""
Unit tests for the deel CLI entry point.

main() is driven with in-memory streams and a client factory that returns a
client wired to the fake API, so the full flag -> settings -> command -> output
path runs without the network.
"""

import io
import json

import pytest

from deelcli import __version__
from deelcli.cli import main
from deelcli.client import DeelClient
from deelcli.exceptions import EXIT_AUTH, EXIT_GENERIC, EXIT_NOT_FOUND, EXIT_SERVER

ENV = {"DEEL_TOKEN": "test-token"}


@pytest.fixture
def run(fake_api):
    """Runs main() and returns (exit_code, stdout, stderr)."""

    def _run(*argv: str, environ=None, factory=None):
        out, err = io.StringIO(), io.StringIO()
        code = main(
            list(argv),
            client_factory=factory or (lambda settings: fake_api.client()),
            stdout=out,
            stderr=err,
            environ=ENV if environ is None else environ,
        )
        return code, out.getvalue(), err.getvalue()

    return _run


@pytest.mark.unit
class TestMain:
    def test_lists_contracts(self, run, fake_api, sample_contracts):
        fake_api.add_collection("/rest/v2/contracts", sample_contracts)

        code, out, err = run("contracts", "list", "--limit", "2")

        assert code == 0
        lines = out.splitlines()
        assert lines[0].split() == ["ID", "TITLE", "WORKER", "ENTITY", "ENTITY", "ID", "TYPE", "STATUS"]
        assert [line.split()[0] for line in lines[1:]] == ["c-1", "c-2"]
        assert "# More results available" in err
        assert "# Next cursor: c2" in err

    def test_empty_result(self, run, fake_api):
        fake_api.add_collection("/rest/v2/teams", [])

        code, out, err = run("teams", "list")

        assert code == 0
        assert out == "No teams found.\n"
        assert err == ""

    def test_json_output(self, run, fake_api, sample_contracts):
        fake_api.add_collection("/rest/v2/contracts", sample_contracts)

        code, out, _ = run("-o", "json", "contracts", "list", "--limit", "2")

        document = json.loads(out)
        assert code == 0
        assert document["total"] == 5
        assert document["next_cursor"] == ""
        assert [c["id"] for c in document["items"]] == ["c-1", "c-2"]
        assert document["items"][0]["entity"] == "Entity 0"

    def test_json_output_from_env(self, run, fake_api):
        fake_api.add_collection("/rest/v2/people", [{"id": "p-1"}])

        code, out, _ = run("people", "list", environ={**ENV, "DEEL_OUTPUT": "json"})

        assert code == 0
        assert json.loads(out)["items"][0]["id"] == "p-1"

    def test_missing_token(self, run):
        code, out, err = run("people", "list", environ={}, factory=DeelClient.from_settings)

        assert code == EXIT_AUTH
        assert out == ""
        assert "Error: failed listing people: No API token found" in err
        assert "  - " in err

    def test_token_flag_overrides_env(self, fake_api):
        seen = {}

        def factory(settings):
            seen["token"] = settings.token
            return fake_api.client()

        fake_api.add_collection("/rest/v2/people", [])
        main(
            ["--token", "from-flag", "people", "list"],
            client_factory=factory,
            stdout=io.StringIO(),
            stderr=io.StringIO(),
            environ=ENV,
        )

        assert seen["token"] == "from-flag"

    def test_not_found(self, run):
        code, out, err = run("it", "assets")

        assert code == EXIT_NOT_FOUND
        assert out == ""
        assert err.startswith("Error: failed listing IT assets: API error 404")

    def test_server_error_mid_aggregation(self, run, fake_api, sample_contracts):
        fake_api.add_collection("/rest/v2/contracts", sample_contracts)
        original = fake_api.handler

        def flaky(request):
            if request.url.params.get("cursor") == "c2":
                fake_api.fail_next("/rest/v2/contracts", 500, {"message": "boom"})
            return original(request)

        fake_api.handler = flaky
        code, out, err = run("contracts", "list", "--all", "--limit", "2")

        assert code == EXIT_SERVER
        assert out == ""
        assert "boom" in err

    def test_pagination_limit(self, run, fake_api):
        fake_api.add_collection("/rest/v2/teams", [{"id": f"t{i}"} for i in range(101)])

        code, out, err = run("teams", "list", "--all", "--limit", "1")

        assert code == EXIT_GENERIC
        assert out == ""
        assert "pagination safety limit reached after 100 pages" in err
        assert len(fake_api.requests) == 100

    def test_invalid_env_timeout(self, run):
        code, _, err = run("people", "list", environ={**ENV, "DEEL_TIMEOUT": "soon"})

        assert code == EXIT_AUTH
        assert "DEEL_TIMEOUT" in err

    def test_debug_logs_to_stderr(self, run, fake_api):
        fake_api.add_collection("/rest/v2/people", [])

        code, _, err = run("--debug", "people", "list")

        assert code == 0
        assert "Fetching page" in err
        assert "test-token" not in err

    def test_interrupt(self, run):
        def factory(settings):
            raise KeyboardInterrupt

        code, _, err = run("people", "list", factory=factory)

        assert code == 130
        assert "Interrupted" in err


@pytest.mark.unit
class TestUsage:
    def test_missing_resource(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_missing_action(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["contracts"])
        assert exc_info.value.code == 2

    def test_unknown_output_format(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-o", "yaml", "people", "list"])
        assert exc_info.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_blank_contract_id(self, fake_api, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(
                ["tasks", "list", "--contract-id", ""],
                client_factory=lambda settings: fake_api.client(),
                environ=ENV,
            )

        assert exc_info.value.code == 2
        assert "must not be empty" in capsys.readouterr().err
        assert fake_api.requests == []
