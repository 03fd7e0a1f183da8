import pytest

from shopdesk import cli
from shopdesk.config import LineConfig, parse_config
from shopdesk.services.notification_service import NotificationService
from shopdesk.services.report_service import ReportService

from conftest import (
    FakeCustomerRepo,
    FakeDb,
    FakePartRepo,
    FakeSession,
    RecordingSession,
    FakeSystemConfigRepo,
    FakeWorkOrderRepo,
    fixed_clock,
)


@pytest.fixture
def run(monkeypatch, business, order_rows, part_rows):
    cfg = parse_config({
        "app": {"name": "Test Shop", "company_id": "c1"},
        "db": {"host": "h", "user": "u", "password": "p"},
    })
    wo_repo = FakeWorkOrderRepo(order_rows)
    report_service = ReportService(
        work_order_repo=wo_repo,
        part_repo=FakePartRepo(part_rows),
        customer_repo=FakeCustomerRepo(),
        business=business,
        clock=fixed_clock,
    )
    notification_service = NotificationService(
        work_order_repo=wo_repo,
        system_config_repo=FakeSystemConfigRepo(),
        line=LineConfig(),
        session=FakeSession(),
    )
    monkeypatch.setattr(cli, "build_services", lambda _cfg: (report_service, notification_service))

    def _run(*answers):
        feed = iter(answers)
        monkeypatch.setattr("builtins.input", lambda _msg="": next(feed))
        cli.run_cli(FakeDb(), cfg)
        return wo_repo

    return _run


def test_dashboard_and_exit(run, capsys):
    run("1", "0")
    out = capsys.readouterr().out
    assert "Today's income:  300.00 THB" in out
    assert "Parts low/total: 1/2" in out


def test_report_with_default_dates(run, capsys):
    run("2", "service", "", "", "0")
    out = capsys.readouterr().out
    assert "efficiency=50%" in out
    assert "IM-WO-26-002" in out


def test_export_writes_file(run, tmp_path, capsys):
    target = tmp_path / "out.csv"
    run("3", "inventory", "2026-10-01", "2026-10-19", str(target), "0")
    assert target.read_bytes().startswith(b"\xef\xbb\xbf")
    assert "IM-CTRL-3000" in target.read_text(encoding="utf-8-sig")


def test_bad_input_keeps_menu_running(run, capsys):
    run("2", "payroll", "0")
    assert "[INPUT ERROR]" in capsys.readouterr().out


def test_status_change_without_line(run, capsys):
    wo_repo = run("5", "wo1", "qc", "Admin", "0")
    assert wo_repo.status_updates == [("wo1", "QC")]
    assert "Status updated to QC." in capsys.readouterr().out


def test_low_stock(run, capsys):
    run("4", "0")
    assert "IM-BATT-LITH" in capsys.readouterr().out


def test_status_change_commits_before_line_push(monkeypatch, capsys):
    cfg = parse_config({
        "app": {"name": "Test Shop", "company_id": "c1"},
        "db": {"host": "h", "user": "u", "password": "p"},
    })
    events = []
    wo_repo = FakeWorkOrderRepo(detail={"order_number": "WO-9", "status": "QC"})
    notification_service = NotificationService(
        work_order_repo=wo_repo,
        system_config_repo=FakeSystemConfigRepo(),
        line=LineConfig(enabled=True, access_token="t", group_id="g"),
        session=RecordingSession(events),
    )
    monkeypatch.setattr(cli, "build_services", lambda _cfg: (None, notification_service))
    feed = iter(["5", "wo9", "qc", "Admin", "0"])
    monkeypatch.setattr("builtins.input", lambda _msg="": next(feed))

    cli.run_cli(FakeDb(events), cfg)

    assert events == ["begin", "commit", "push"]
    assert wo_repo.status_updates == [("wo9", "QC")]
    assert "LINE notified." in capsys.readouterr().out


def test_build_services_shares_one_http_session():
    cfg = parse_config({
        "app": {"name": "Test Shop", "company_id": "c1"},
        "db": {"host": "h", "user": "u", "password": "p"},
        "line": {"enabled": True, "access_token": "t", "group_id": "g"},
    })
    _, notification_service = cli.build_services(cfg)
    first = notification_service.notifier(None)
    second = notification_service.notifier(None)
    assert first.session is notification_service.session
    assert second.session is first.session


def test_schema_script_option(run, capsys):
    run("8", "0")
    assert "CREATE TABLE IF NOT EXISTS system_config" in capsys.readouterr().out
