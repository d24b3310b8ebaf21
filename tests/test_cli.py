"""Command line tests (``hortela check`` / ``hortela balance``)."""

import logging
from io import StringIO

import pytest

from hortela.cli import EXIT_INVALID, EXIT_OK, EXIT_USAGE, main
from hortela.logging_config import configure_logging, reset_logging

UNBALANCED = '2020-01-01 transaction "x"\n< 100 BRL assets:a\n> 99 BRL equity:b\n'


@pytest.fixture(autouse=True)
def _logging_already_configured():
    """main() configures logging once per process; keep JSON lines out of err."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield


def _run(*argv):
    out, err = StringIO(), StringIO()
    code = main(list(argv), out=out, err=err)
    return code, out.getvalue(), err.getvalue()


@pytest.fixture
def write_ledger(tmp_path):
    def _write(source: str, name: str = "ledger.hta"):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write


class TestCheckCommand:

    def test_valid_ledger(self, write_ledger, household_source):
        code, out, err = _run("check", str(write_ledger(household_source)))
        assert code == EXIT_OK
        assert out.splitlines() == [
            "Running validator: validate that credits and debits balance... OK",
            "Running validator: validate that all isolated transactions are properly balanced... OK",
            "Running validator: validate that all balance statements are correct... OK",
        ]

    def test_stops_at_first_failure(self, write_ledger):
        code, out, err = _run("check", str(write_ledger(UNBALANCED)))
        assert code == EXIT_INVALID
        assert out.splitlines() == [
            "Running validator: validate that credits and debits balance... ERROR",
            "Skipped validator: validate that all isolated transactions are properly balanced",
            "Skipped validator: validate that all balance statements are correct",
        ]
        assert "error: Budget does not balance, expected `0`, found -1" in err
        assert "Running validation `validate that credits and debits balance` failed." in err

    def test_all_flag_runs_every_check(self, write_ledger):
        code, out, err = _run("check", str(write_ledger(UNBALANCED)), "--all")
        assert code == EXIT_INVALID
        assert [line.rsplit(" ", 1)[-1] for line in out.splitlines()] == ["ERROR", "ERROR", "OK"]
        assert "error: Transaction does not balance" in err
        assert "ledger.hta:1:1" in err

    def test_syntax_errors_reported_and_not_validated(self, write_ledger):
        path = write_ledger("2021-02-30 open assets:cash BRL\n2020-01-01 open assets:a:b:c:d BRL\n")
        code, out, err = _run("check", str(path))
        assert code == EXIT_INVALID
        assert out == ""
        assert "2021-02-30 is not a valid calendar date" in err
        assert "accounts may contain at most 3 segments beyond their kind." in err
        assert "2 error(s), not validated" in err

    def test_missing_file(self, tmp_path):
        code, out, err = _run("check", str(tmp_path / "nope.hta"))
        assert code == EXIT_USAGE
        assert err.startswith("ERROR: cannot read")

    def test_config_selects_checks(self, write_ledger, tmp_path):
        config = tmp_path / "hortela.yaml"
        config.write_text("checks: [balance_statements]\n")
        code, out, _ = _run("check", str(write_ledger(UNBALANCED)), "--config", str(config))
        assert code == EXIT_OK
        assert out.splitlines() == [
            "Running validator: validate that all balance statements are correct... OK",
        ]

    def test_config_disables_fail_fast(self, write_ledger, tmp_path):
        config = tmp_path / "hortela.yaml"
        config.write_text("fail_fast: false\n")
        _, out, _ = _run("check", str(write_ledger(UNBALANCED)), "--config", str(config))
        assert len(out.splitlines()) == 3
        assert "Skipped" not in out

    def test_invalid_config(self, write_ledger, tmp_path):
        config = tmp_path / "hortela.yaml"
        config.write_text("checks: [nonexistent]\n")
        code, _, err = _run("check", str(write_ledger("")), "--config", str(config))
        assert code == EXIT_USAGE
        assert "nonexistent" in err

    def test_missing_config(self, write_ledger, tmp_path):
        code, _, err = _run(
            "check", str(write_ledger("")), "--config", str(tmp_path / "absent.yaml")
        )
        assert code == EXIT_USAGE
        assert "config file not found" in err

    def test_malformed_config(self, write_ledger, tmp_path):
        config = tmp_path / "hortela.yaml"
        config.write_text("checks: [unclosed\n")
        code, out, err = _run("check", str(write_ledger("")), "--config", str(config))
        assert code == EXIT_USAGE
        assert out == ""
        assert err.startswith(f"ERROR: cannot load config {config}")

    def test_config_path_is_directory(self, write_ledger, tmp_path):
        code, _, err = _run("check", str(write_ledger("")), "--config", str(tmp_path))
        assert code == EXIT_USAGE
        assert err.startswith("ERROR: cannot load config")

    def test_empty_ledger_passes(self, write_ledger):
        code, out, _ = _run("check", str(write_ledger("")))
        assert code == EXIT_OK
        assert out.count("... OK") == 3


class TestBalanceCommand:

    def test_prints_table(self, write_ledger, household_source):
        code, out, _ = _run("balance", str(write_ledger(household_source)))
        assert code == EXIT_OK
        lines = out.splitlines()
        assert lines[0].split() == ["account", "currency", "debits", "credits", "balance"]
        assert ["assets:cash", "BRL", "100", "30.25", "69.75"] in [line.split() for line in lines]

    def test_as_of(self, write_ledger, household_source):
        code, out, _ = _run(
            "balance", str(write_ledger(household_source)), "--as-of", "2020-01-01"
        )
        assert code == EXIT_OK
        assert out.splitlines()[0] == "as of 2020-01-01"
        assert ["assets:cash", "BRL", "100", "0", "100"] in [line.split() for line in out.splitlines()]

    def test_bad_source(self, write_ledger):
        code, out, err = _run("balance", str(write_ledger("@@")))
        assert code == EXIT_INVALID
        assert out == ""
        assert "error:" in err

    def test_bad_as_of_is_usage_error(self, write_ledger):
        with pytest.raises(SystemExit) as exc_info:
            _run("balance", str(write_ledger("")), "--as-of", "yesterday")
        assert exc_info.value.code == 2
