"""
Tests for the ledgerctl CLI.
"""

import json

import pytest

from inventory_ledger.cli.ledgerctl import check_database, main
from inventory_ledger.config import reload_config

OWNER = "0xaa"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("LEDGER_DB_PATH", "LEDGER_OWNER", "LEDGER_API_URL"):
        monkeypatch.delenv(name, raising=False)
    reload_config()
    yield
    reload_config()


@pytest.fixture
def db(tmp_path):
    return str(tmp_path / "ledger.db")


def run(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestItemCommands:
    """Test item commands against a SQLite database."""

    def test_add_list_remove(self, capsys, db):
        code, out, _ = run(capsys, "--db", db, "--owner", OWNER, "add", "widget", "10", "5")
        assert code == 0
        assert json.loads(out) == {"item_id": 0}

        code, out, _ = run(capsys, "--db", db, "--owner", OWNER, "update", "0", "3", "reserved")
        assert code == 0
        assert json.loads(out)["status"] == "reserved"

        code, _, _ = run(capsys, "--db", db, "--owner", OWNER, "remove", "0")
        assert code == 0

        run(capsys, "--db", db, "--owner", OWNER, "add", "gadget", "1", "1")

        code, out, _ = run(capsys, "--db", db, "--owner", OWNER, "list")
        items = json.loads(out)
        assert [item["name"] for item in items] == ["", "gadget"]

        code, out, _ = run(capsys, "--db", db, "--owner", OWNER, "list", "--live")
        assert list(json.loads(out)) == ["1"]

    def test_get_any_owner(self, capsys, db):
        run(capsys, "--db", db, "--owner", OWNER, "add", "widget", "10", "5")

        code, out, _ = run(capsys, "--db", db, "get", OWNER, "0")
        assert code == 0
        assert json.loads(out)["name"] == "widget"

    def test_ledger_error_exit_code(self, capsys, db):
        code, _, err = run(capsys, "--db", db, "--owner", OWNER, "add", "widget", "0", "5")
        assert code == 1
        assert "invalid_quantity" in err

        code, _, err = run(capsys, "--db", db, "get", OWNER, "0")
        assert code == 1
        assert "item_not_found" in err

    def test_owner_from_environment(self, capsys, db, monkeypatch):
        monkeypatch.setenv("LEDGER_OWNER", OWNER)
        code, out, _ = run(capsys, "--db", db, "add", "widget", "1", "1")
        assert code == 0
        assert json.loads(out) == {"item_id": 0}

    def test_owner_required(self, capsys, db):
        with pytest.raises(SystemExit):
            main(["--db", db, "add", "widget", "1", "1"])

    def test_database_required(self, capsys):
        code, _, err = run(capsys, "--owner", OWNER, "list")
        assert code == 2
        assert "No database configured" in err


class TestLimitsCommand:
    """Test the limits command."""

    def test_show_and_set(self, capsys, db):
        code, out, _ = run(capsys, "--db", db, "limits", "--set", "5", "6")
        assert code == 0
        assert json.loads(out) == {"max_quantity": 5, "max_price": 6}

        code, out, _ = run(capsys, "--db", db, "limits")
        assert json.loads(out) == {"max_quantity": 5, "max_price": 6}

        code, _, err = run(capsys, "--db", db, "limits", "--set", "0", "6")
        assert code == 1
        assert "invalid_limits" in err


class TestDoctorAndVersion:
    """Test diagnostic commands."""

    def test_version(self, capsys):
        code, out, _ = run(capsys, "version")
        assert code == 0
        assert "ledgerctl version" in out

    def test_check_database(self, capsys, db):
        assert check_database(None)[0] == "WARN"
        assert check_database(db)[0] == "WARN"

        run(capsys, "--db", db, "--owner", OWNER, "add", "widget", "1", "1")
        status, message = check_database(db)
        assert status == "OK"
        assert "max_quantity=" in message

    def test_doctor_without_api(self, capsys, db):
        run(capsys, "--db", db, "--owner", OWNER, "add", "widget", "1", "1")

        code, out, _ = run(capsys, "--db", db, "doctor")
        assert code == 0
        assert "All critical checks passed" in out

    def test_no_command_prints_help(self, capsys):
        code, out, _ = run(capsys)
        assert code == 0
        assert "usage" in out.lower()


class TestDoctorReadOnly:
    """Test that doctor never writes to the database it inspects."""

    def test_empty_file_left_untouched(self, tmp_path):
        db = tmp_path / "empty.db"
        db.write_bytes(b"")

        status, message = check_database(str(db))

        assert status == "WARN"
        assert "no ledger tables" in message
        assert db.read_bytes() == b""

    def test_existing_database_unchanged(self, capsys, db):
        run(capsys, "--db", db, "--owner", OWNER, "add", "widget", "1", "1")
        with open(db, "rb") as f:
            before = f.read()

        assert check_database(db)[0] == "OK"

        with open(db, "rb") as f:
            assert f.read() == before

    def test_not_a_database(self, tmp_path):
        bogus = tmp_path / "notes.db"
        bogus.write_text("x" * 200)

        assert check_database(str(bogus))[0] == "ERROR"
