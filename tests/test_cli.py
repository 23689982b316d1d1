"""End-to-end tests for the command line interface."""

from payables.cli.main import cli


def _extract_id(output: str) -> str:
    # Output looks like "Created account 'Electricity' (ID: 1)"
    for line in output.split("\n"):
        if "ID:" in line:
            return line.split("ID:")[1].strip().rstrip(")")
    raise AssertionError(f"No ID in output: {output!r}")


def test_missing_tenant_fails(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "dues"],
        env={"PAYABLES_TENANT": ""},
    )
    assert result.exit_code == 1
    assert "No tenant given" in result.output


def test_help_does_not_need_tenant(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "dues" in result.output


def test_full_workflow(cli_runner, cli_args):
    """Test supplier → account → dues → pay → history."""
    result = cli_runner.invoke(cli, cli_args + ["supplier", "create", "Energia SA", "--email"])
    assert result.exit_code == 0, result.output
    assert "Created supplier 'Energia SA'" in result.output

    result = cli_runner.invoke(
        cli,
        cli_args
        + [
            "account",
            "create",
            "--supplier",
            "Energia SA",
            "--description",
            "Electricity",
            "--amount",
            "1.000,00",
            "--issue-day",
            "5",
            "--due-day",
            "10",
            "--start-date",
            "2024-01-03",
            "--cost-center",
            "ADM:60",
            "--cost-center",
            "OPS:40",
        ],
    )
    assert result.exit_code == 0, result.output
    account_id = _extract_id(result.output)

    result = cli_runner.invoke(cli, cli_args + ["dues", "--as-of", "2024-03-20"])
    assert result.exit_code == 0, result.output
    assert "Occurrences as of 2024-03-20" in result.output
    assert "Overdue (3):" in result.output
    assert "Upcoming (0):" in result.output

    pay_args = [
        "pay",
        account_id,
        "--period",
        "2024-02",
        "--invoice",
        "NF-100",
        "--recipient",
        "Finance",
        "--date",
        "2024-02-12",
    ]
    result = cli_runner.invoke(cli, cli_args + pay_args)
    assert result.exit_code == 0, result.output
    assert f"for account {account_id}, period 2024-02" in result.output

    # Same period again is rejected
    result = cli_runner.invoke(cli, cli_args + pay_args)
    assert result.exit_code == 1
    assert "already paid" in result.output

    result = cli_runner.invoke(cli, cli_args + ["dues", "--as-of", "2024-03-20"])
    assert "Overdue (2):" in result.output
    assert "Paid (1):" in result.output
    assert "NF-100" in result.output

    result = cli_runner.invoke(cli, cli_args + ["dues", "--as-of", "2024-03-20", "--hide-paid"])
    assert "Paid (" not in result.output

    result = cli_runner.invoke(cli, cli_args + ["history", "-v"])
    assert result.exit_code == 0, result.output
    assert "Found 1 payment(s):" in result.output
    assert "Due: 2024-02-10" in result.output
    assert "ADM" in result.output
    assert "600.00" in result.output
    assert "400.00" in result.output

    result = cli_runner.invoke(cli, cli_args + ["history", "--search", "nothing-like-this"])
    assert result.exit_code == 0
    assert "No payments found." in result.output

    # Accounts with payments cannot be deleted
    result = cli_runner.invoke(cli, cli_args + ["account", "delete", account_id, "--yes"])
    assert result.exit_code == 1
    assert "Cannot delete account" in result.output


def test_supplier_commands(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["supplier", "list"])
    assert "No suppliers found." in result.output

    result = cli_runner.invoke(cli, cli_args + ["supplier", "create", "Water Co"])
    supplier_id = _extract_id(result.output)

    result = cli_runner.invoke(cli, cli_args + ["supplier", "create", "Water Co"])
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = cli_runner.invoke(cli, cli_args + ["supplier", "deactivate", supplier_id])
    assert result.exit_code == 0
    assert f"Supplier {supplier_id} is now inactive" in result.output

    result = cli_runner.invoke(cli, cli_args + ["supplier", "list"])
    assert "Water Co" in result.output


def test_account_commands(cli_runner, cli_args, sample_account):
    result = cli_runner.invoke(cli, cli_args + ["account", "list"])
    assert result.exit_code == 0, result.output
    assert "Electricity" in result.output

    result = cli_runner.invoke(cli, cli_args + ["account", "show", str(sample_account.id)])
    assert "Cost centers: ADM 60.00%, OPS 40.00%" in result.output

    result = cli_runner.invoke(cli, cli_args + ["account", "edit", str(sample_account.id), "--due-day", "40"])
    assert result.exit_code == 1
    assert "between 1 and 31" in result.output

    result = cli_runner.invoke(
        cli, cli_args + ["account", "end", str(sample_account.id), "--date", "2024-02-15"]
    )
    assert result.exit_code == 0
    assert f"Account {sample_account.id} ends on 2024-02-15" in result.output

    result = cli_runner.invoke(cli, cli_args + ["dues", "--as-of", "2024-12-01"])
    assert "Overdue (2):" in result.output

    result = cli_runner.invoke(cli, cli_args + ["account", "delete", str(sample_account.id), "--yes"])
    assert result.exit_code == 0
    assert "Deleted account 'Electricity'" in result.output

    result = cli_runner.invoke(cli, cli_args + ["account", "list"])
    assert "No accounts found." in result.output


def test_other_tenant_sees_nothing(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "--tenant", "globex", "dues", "--as-of", "2024-03-20"],
    )
    assert result.exit_code == 0
    assert "No occurrences found." in result.output


def test_history_rejects_conflicting_periods(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["history", "--this-month", "--last-month"])
    assert result.exit_code == 1
    assert "Only one period option" in result.output


def test_pay_rejects_bad_period(cli_runner, cli_args, sample_account):
    result = cli_runner.invoke(
        cli,
        cli_args
        + ["pay", str(sample_account.id), "--period", "2024-13", "--invoice", "NF-1", "--recipient", "Finance"],
    )
    assert result.exit_code == 1
    assert "Could not parse period" in result.output
