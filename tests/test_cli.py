import json
import textwrap
from pathlib import Path

from typer.testing import CliRunner

from apidesign.cli import app

runner = CliRunner()


def write(p: Path, s: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(s), encoding="utf-8")


GOOD = """
from apidesign.dsl.action import action, get, payload, put, routing
from apidesign.dsl.api import base_path, resource
from apidesign.dsl.attribute import member


def design(ctx):
    def update():
        routing(ctx, put("/:id"))
        payload(ctx, lambda: member(ctx, "name"))

    def account():
        base_path(ctx, "/accounts")
        action(ctx, "show", lambda: routing(ctx, get("/:id")))
        action(ctx, "update", update)

    resource(ctx, "account", account)
"""

BAD = """
from apidesign.dsl.action import action, get, payload, routing
from apidesign.dsl.api import base_path, resource


def design(ctx):
    def account():
        base_path(ctx, "/accounts/:id")
        action(ctx, "show", lambda: routing(ctx, get("/:id")))
        action(ctx, "update", lambda: payload(ctx, "Nonexistent"))

    resource(ctx, "account", account)
"""


def test_check_ok(tmp_path: Path):
    f = tmp_path / "design.py"
    write(f, GOOD)

    result = runner.invoke(app, ["check", str(f)])

    assert result.exit_code == 0
    assert "ok" in result.output
    assert "actions=2" in result.output


def test_check_reports_all_errors(tmp_path: Path):
    f = tmp_path / "design.py"
    write(f, BAD)

    result = runner.invoke(app, ["check", str(f)])

    assert result.exit_code == 1
    assert "2 error(s)" in result.output
    assert "conflict" in result.output
    assert "reference" in result.output


def test_routes_json(tmp_path: Path):
    f = tmp_path / "design.py"
    write(f, GOOD)

    result = runner.invoke(app, ["routes", str(f), "--format", "json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    actions = data[0]["actions"]
    assert [a["name"] for a in actions] == ["show", "update"]
    assert actions[1]["routes"][0]["full_path"] == "/accounts/:id"
    assert actions[1]["payload"] == "UpdateAccountPayload"


def test_routes_table(tmp_path: Path):
    f = tmp_path / "design.py"
    write(f, GOOD)

    result = runner.invoke(app, ["routes", str(f)])

    assert result.exit_code == 0
    assert "PUT" in result.output
    assert "UpdateAccountPayload" in result.output


def test_missing_design_file(tmp_path: Path):
    result = runner.invoke(app, ["check", str(tmp_path / "nope.py")])
    assert result.exit_code != 0


def test_design_file_without_entrypoint(tmp_path: Path):
    f = tmp_path / "empty.py"
    write(f, "x = 1\n")
    result = runner.invoke(app, ["check", str(f)])
    assert result.exit_code != 0


def test_unimportable_design_file(tmp_path: Path):
    f = tmp_path / "broken.py"
    write(f, "def design(ctx:\n")
    result = runner.invoke(app, ["check", str(f)])
    assert result.exit_code == 2
    assert not isinstance(result.exception, SyntaxError)


def test_ping():
    result = runner.invoke(app, ["ping"])
    assert result.exit_code == 0
    assert "pong" in result.output
