import json

import pytest
from typer.testing import CliRunner

import expense_analysis.analysis as analysis_mod
from expense_analysis.categories import get_all_categories
from expense_analysis.cli import app
from expense_analysis.storage import LocalStore
from tests.helpers.openai_stub import OpenAIStub
from tests.helpers.statements import GENERIC_CSV

runner = CliRunner()


@pytest.fixture
def export_csv(tmp_path, monkeypatch):
    # Run from an empty directory so no stray .env is picked up.
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "export.csv"
    path.write_text(GENERIC_CSV, encoding="utf-8")
    return path


def test_parse_prints_transactions(export_csv):
    result = runner.invoke(app, ["parse", str(export_csv)])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == [
        "Generic CSV\t2025-02-03\t2025-02-04\t2",
        "0\t2025-02-04\t15000.00\tOstatní\tVýplata",
        "1\t2025-02-03\t-899.00\tTankování\tCS ORLEN Praha 4",
    ]


def test_parse_json_and_save(export_csv):
    result = runner.invoke(app, ["parse", str(export_csv), "--json", "--save"])

    assert result.exit_code == 0
    doc = json.loads(result.stdout)
    assert doc["bankName"] == "Generic CSV"
    assert [t["amount"] for t in doc["transactions"]] == [15000.0, -899.0]

    restored = LocalStore().load()
    assert restored is not None
    assert len(restored.data.transactions) == 2


def test_parse_reports_errors(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    bad = tmp_path / "bad.csv"
    bad.write_text("foo;bar\n1;2\n", encoding="utf-8")

    result = runner.invoke(app, ["parse", str(bad)])
    assert result.exit_code == 1
    assert "Error: Could not find the header row" in result.output

    result = runner.invoke(app, ["parse", str(tmp_path / "missing.csv")])
    assert result.exit_code == 1
    assert "Error: file not found" in result.output


def test_summary(export_csv):
    result = runner.invoke(app, ["summary", str(export_csv)])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == [
        "Bank: Generic CSV",
        "Period: 3 Feb 2025 – 4 Feb 2025",
        "Total expenses: 899\u00a0Kč (1 transactions)",
        "Total income: 15\u00a0000\u00a0Kč (1 transactions)",
        "Net balance: 14\u00a0101\u00a0Kč",
        "Average expense: 899\u00a0Kč",
        "Tankování\t899\t100.0%\t1",
    ]


def test_analyze(export_csv, monkeypatch):
    stub = OpenAIStub(output_text="Vše v pořádku.")
    monkeypatch.setattr(analysis_mod, "OpenAI", stub.factory)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    result = runner.invoke(app, ["analyze", str(export_csv), "--model", "gpt-4.1-mini"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "Vše v pořádku."
    assert stub.calls[0]["model"] == "gpt-4.1-mini"
    assert stub.calls[0]["input"].startswith("Period: 3 Feb 2025 – 4 Feb 2025")


def test_analyze_without_key(export_csv):
    result = runner.invoke(app, ["analyze", str(export_csv)])
    assert result.exit_code == 1
    assert "Error: OPENAI_API_KEY" in result.output


def test_categories_add_and_list(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["categories", "--add", "  Sport "])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == [*get_all_categories(), "Sport"]

    result = runner.invoke(app, ["categories"])
    assert result.stdout.splitlines()[-1] == "Sport"

    result = runner.invoke(app, ["categories", "--add", "potraviny"])
    assert result.exit_code == 1
    assert "Error: category already exists" in result.output


def test_parse_rejects_non_csv_and_empty_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    txt = tmp_path / "export.txt"
    txt.write_text(GENERIC_CSV, encoding="utf-8")
    empty = tmp_path / "empty.csv"
    empty.write_text("", encoding="utf-8")

    result = runner.invoke(app, ["parse", str(txt)])
    assert result.exit_code == 1
    assert "Error: Invalid file type. Please upload a CSV file." in result.output

    result = runner.invoke(app, ["parse", str(empty)])
    assert result.exit_code == 1
    assert "Error: The file is empty." in result.output


@pytest.fixture
def saved(export_csv):
    result = runner.invoke(app, ["parse", str(export_csv), "--save"])
    assert result.exit_code == 0
    return export_csv


def test_show_lists_stored_transactions(saved):
    result = runner.invoke(app, ["show"])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == [
        "Generic CSV\t2025-02-03\t2025-02-04\t2",
        "0\t2025-02-04\t15\u00a0000\u00a0Kč\tOstatní\tVýplata",
        "1\t2025-02-03\t-899\u00a0Kč\tTankování\tCS ORLEN Praha 4",
    ]


def test_show_range_is_stored(saved):
    result = runner.invoke(app, ["show", "--from", "04.02.2025"])
    assert result.exit_code == 0
    assert result.stdout.splitlines()[0] == "Generic CSV\t2025-02-04\t2025-02-04\t1"

    restored = LocalStore().load()
    assert str(restored.selected_range.start) == "2025-02-04"

    result = runner.invoke(app, ["summary"])
    assert result.stdout.splitlines()[1] == "Period: 4 Feb 2025 – 4 Feb 2025"
    assert "Total expenses: 0\u00a0Kč (0 transactions)" in result.stdout


def test_show_rejects_bad_ranges(saved):
    result = runner.invoke(app, ["show", "--from", "someday"])
    assert result.exit_code == 1
    assert "Error: unreadable --from date" in result.output

    result = runner.invoke(app, ["show", "--from", "05.02.2025", "--to", "01.02.2025"])
    assert result.exit_code == 1
    assert "is after end" in result.output


def test_commands_without_stored_data(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for args in (["show"], ["summary"], ["set-category", "0", "Zábava"], ["toggle-internal", "0"]):
        result = runner.invoke(app, args)
        assert result.exit_code == 1
        assert "no statement is stored" in result.output


def test_set_category(saved):
    result = runner.invoke(app, ["set-category", "1", "zábava"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "1\tZábava"
    assert LocalStore().load().data.transactions[1].category == "Zábava"

    result = runner.invoke(app, ["set-category", "1", "Neexistuje"])
    assert result.exit_code == 1
    assert "Error: unknown category: Neexistuje" in result.output

    result = runner.invoke(app, ["set-category", "7", "Zábava"])
    assert result.exit_code == 1
    assert "Error: no transaction with id 7" in result.output


def test_set_category_accepts_user_categories(saved):
    runner.invoke(app, ["categories", "--add", "Sport"])

    result = runner.invoke(app, ["set-category", "1", "sport"])
    assert result.exit_code == 0
    assert LocalStore().load().data.transactions[1].category == "Sport"


def test_toggle_internal_excludes_from_summary(saved):
    result = runner.invoke(app, ["toggle-internal", "1"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "1\tinternal"

    show = runner.invoke(app, ["show"])
    assert show.stdout.splitlines()[2].endswith("\tinternal")

    summary = runner.invoke(app, ["summary"])
    assert "Total expenses: 0\u00a0Kč (0 transactions)" in summary.stdout
    summary = runner.invoke(app, ["summary", "--include-internal"])
    assert "Total expenses: 899\u00a0Kč (1 transactions)" in summary.stdout

    result = runner.invoke(app, ["toggle-internal", "1"])
    assert result.stdout.strip() == "1\texternal"


def test_privacy_mode_masks_output(saved):
    result = runner.invoke(app, ["privacy"])
    assert result.stdout.strip() == "Privacy mode: off"

    result = runner.invoke(app, ["privacy", "on"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "Privacy mode: on"
    assert LocalStore().load_privacy_mode() is True

    show = runner.invoke(app, ["show"])
    assert show.stdout.splitlines()[1:] == [
        "0\t2025-02-04\t****\tOstatní\tVý***a",
        "1\t2025-02-03\t****\tTankování\tCS ORLEN ***",
    ]

    summary = runner.invoke(app, ["summary", str(saved)])
    lines = summary.stdout.splitlines()
    assert lines[2] == "Total expenses: **** (1 transactions)"
    assert lines[-1] == "Tankování\t****\t100.0%\t1"

    runner.invoke(app, ["privacy", "off"])
    assert LocalStore().load_privacy_mode() is False


def test_privacy_rejects_unknown_state(saved):
    result = runner.invoke(app, ["privacy", "maybe"])
    assert result.exit_code == 2


def test_clear(saved):
    runner.invoke(app, ["categories", "--add", "Sport"])

    result = runner.invoke(app, ["clear"])
    assert result.exit_code == 0
    assert LocalStore().load() is None
    assert LocalStore().load_custom_categories() == ["Sport"]


def test_analyze_stored_statement(saved, monkeypatch):
    stub = OpenAIStub(output_text="OK")
    monkeypatch.setattr(analysis_mod, "OpenAI", stub.factory)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    result = runner.invoke(app, ["analyze"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "OK"
    assert stub.calls[0]["input"].startswith("Period: 3 Feb 2025 – 4 Feb 2025")
