from __future__ import annotations

from decimal import Decimal

from ratecompare.models import Rate
from ratecompare.providers.base import DateSupport, ProviderError
from tests.factories import ScriptedProvider

OXR = "openexchangerates.org"
VISA = "visa.com"


def test_backfill_command_imports_window(app, install_resolver, make_resolver, db_session):
    install_resolver(make_resolver(ScriptedProvider(VISA, default="1.35")))
    runner = app.test_cli_runner()

    result = runner.invoke(args=["backfill-rates", "--start-offset", "-3", "--end-offset", "-1"])

    assert result.exit_code == 0, result.output
    assert "Import complete: 3 rates stored." in result.output
    assert db_session.query(Rate).count() == 3


def test_backfill_command_treats_existing_rates_as_nothing_to_do(
    app, install_resolver, make_resolver, db_session
):
    install_resolver(make_resolver(ScriptedProvider(VISA, default="1.35")))
    runner = app.test_cli_runner()
    args = ["backfill-rates", "--start-offset", "-2", "--end-offset", "-1"]
    runner.invoke(args=args)

    result = runner.invoke(args=args)

    assert result.exit_code == 0, result.output
    assert "Nothing to do" in result.output
    assert db_session.query(Rate).count() == 2


def test_backfill_command_fails_on_provider_error(app, install_resolver, make_resolver, clock, db_session):
    card = ScriptedProvider(VISA, rates={clock.offset(-1): ProviderError("quota exceeded")}, default="1.35")
    install_resolver(make_resolver(card))
    runner = app.test_cli_runner()

    result = runner.invoke(args=["backfill-rates", "--start-offset", "-2", "--end-offset", "-1"])

    assert result.exit_code == 1
    assert "quota exceeded" in result.output
    assert db_session.query(Rate).count() == 1


def test_backfill_command_accepts_source(app, install_resolver, make_resolver, db_session):
    api = ScriptedProvider(OXR, default="1.34")
    card = ScriptedProvider(VISA, default="1.35")
    install_resolver(make_resolver(api, card))
    runner = app.test_cli_runner()

    result = runner.invoke(
        args=["backfill-rates", "--start-offset", "-1", "--end-offset", "-1", "--source", OXR]
    )

    assert result.exit_code == 0, result.output
    assert len(api.calls) == 1
    assert card.calls == []


def test_show_report_prints_table(app, install_resolver, make_resolver, clock, db_session):
    resolver = install_resolver(
        make_resolver(ScriptedProvider(OXR, default="1.30"), ScriptedProvider(VISA, default="1.30"))
    )
    pair = resolver.get_or_create_pair("USD", "CAD", 1)
    resolver.add_rate_value(pair, resolver.get_or_create_source(VISA), clock.offset(-1), Decimal("1.3"))
    runner = app.test_cli_runner()

    result = runner.invoke(args=["show-report", "--days", "3"])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "USD to CAD"
    assert lines[-1].split() == ["Average", "1.3", "1.3", "+0.00%"]


def test_show_report_notes_truncation(app, install_resolver, make_resolver, clock, db_session):
    card = ScriptedProvider(VISA, date_support=DateSupport.TODAY_ONLY, default="1.31")
    resolver = install_resolver(make_resolver(ScriptedProvider(OXR, default="1.30"), card))
    pair = resolver.get_or_create_pair("USD", "CAD", 1)
    resolver.add_rate_value(pair, resolver.get_or_create_source(VISA), clock(), Decimal("1.31"))
    runner = app.test_cli_runner()

    result = runner.invoke(args=["show-report", "--days", "5"])

    assert result.exit_code == 0, result.output
    assert "Window stopped after 0 of 5 days" in result.output


def test_show_report_without_anchor_fails(app, install_resolver, make_resolver, db_session):
    install_resolver(make_resolver(ScriptedProvider(OXR), ScriptedProvider(VISA)))
    runner = app.test_cli_runner()

    result = runner.invoke(args=["show-report"])

    assert result.exit_code == 1
    assert "No rates found" in result.output
