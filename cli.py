import logging

import click

from config.settings import LOG_LEVEL, LOG_FORMAT, OUTPUT_DIR, DEFAULT_REPORT_NAME, DEFAULT_CHART_NAME
from components.charts import create_principal_interest_area, save_chart_html
from components.tables import format_schedule_table
from core.calculator import calc_pmt
from core.schedule_generator import generate_schedule, schedule_to_dataframe
from core.summary import summarize_schedule, calc_effective_annual_rate
from data_manager.exporter import render_text_report, write_text_report, write_text_reports, schedule_to_csv
from data_manager.schema import LoanTerms
from data_manager.text_parser import read_loan_file, read_repayment_file, read_rate_file
from utils.date_utils import normalize_date
from utils.formatters import fmt_amount, fmt_rate

logger = logging.getLogger(__name__)


def loan_options(func):
    """Options shared by every command that builds a schedule."""
    options = [
        click.option('--loan-file', type=click.Path(exists=True, dir_okay=False), help='Delimited loan file (principal, rate %, loan date, first payment date, maturity date, periods)'),
        click.option('--loan-index', type=int, default=0, show_default=True, help='Which loan of the loan file to use'),
        click.option('--principal', type=float, help='Loan principal'),
        click.option('--annual-rate', type=float, help='Annual interest rate in percent, e.g. 5 for 5%'),
        click.option('--loan-date', type=str, help='Disbursement date (YYYY-MM-DD)'),
        click.option('--first-payment-date', type=str, help='First installment date (YYYY-MM-DD)'),
        click.option('--maturity-date', type=str, help='Maturity date (YYYY-MM-DD), overrides the last due date'),
        click.option('--periods', type=int, help='Total number of periods'),
        click.option('--repayments-file', type=click.Path(exists=True, dir_okay=False), help='Extra repayments (date, amount)'),
        click.option('--rates-file', type=click.Path(exists=True, dir_okay=False), help='Rate changes (date, rate %)'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


MANUAL_LOAN_OPTIONS = ['principal', 'annual_rate', 'loan_date', 'first_payment_date', 'maturity_date', 'periods']


def _read_event_files(repayments_file, rates_file):
    repayments = read_repayment_file(repayments_file) if repayments_file else []
    rate_changes = read_rate_file(rates_file) if rates_file else []
    return repayments, rate_changes


def _read_loans(loan_file, **manual):
    passed = [f"--{name.replace('_', '-')}" for name in MANUAL_LOAN_OPTIONS if manual.get(name) is not None]
    if passed:
        raise click.UsageError(f"{', '.join(passed)} cannot be combined with --loan-file.")
    loans = read_loan_file(loan_file)
    if not loans:
        raise click.ClickException(f"No loan records found in '{loan_file}'.")
    return loans


def _build_inputs(loan_file, loan_index, principal, annual_rate, loan_date,
                  first_payment_date, maturity_date, periods, repayments_file, rates_file):
    if loan_file:
        loans = _read_loans(
            loan_file, principal=principal, annual_rate=annual_rate, loan_date=loan_date,
            first_payment_date=first_payment_date, maturity_date=maturity_date, periods=periods,
        )
        if not 0 <= loan_index < len(loans):
            raise click.BadParameter(
                f"File has {len(loans)} loan(s); index {loan_index} is out of range.",
                param_hint='--loan-index',
            )
        loan = loans[loan_index]
    else:
        missing = [name for name, value in [
            ('--principal', principal), ('--annual-rate', annual_rate),
            ('--loan-date', loan_date), ('--first-payment-date', first_payment_date),
            ('--periods', periods),
        ] if value is None]
        if missing:
            raise click.UsageError(f"Missing {', '.join(missing)} (or pass --loan-file).")
        loan = LoanTerms(
            principal=principal,
            annual_rate=annual_rate / 100,
            loan_date=normalize_date(loan_date),
            first_payment_date=normalize_date(first_payment_date),
            maturity_date=normalize_date(maturity_date) if maturity_date else None,
            total_periods=periods,
            loan_id="CLI",
        )

    repayments, rate_changes = _read_event_files(repayments_file, rates_file)
    logger.info("Loan %r: %d extra repayment(s), %d rate change(s)",
                loan.loan_id, len(repayments), len(rate_changes))
    return loan, repayments, rate_changes


@click.group()
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False), default=LOG_LEVEL, show_default=True, help='Logging level')
def cli(log_level):
    """Loan amortization schedule engine."""
    logging.basicConfig(level=log_level, format=LOG_FORMAT)


@cli.command()
@click.option('--principal', type=float, required=True, help='Outstanding balance')
@click.option('--annual-rate', type=float, required=True, help='Annual interest rate in percent')
@click.option('--periods', type=int, required=True, help='Remaining periods')
def pmt(principal, annual_rate, periods):
    """Calculates the level monthly installment."""
    installment = calc_pmt(principal, annual_rate / 100 / 12, periods)
    click.echo(f"Monthly installment: {installment:.2f}")


@cli.command()
@loan_options
@click.option('--format', 'output_format', type=click.Choice(['table', 'csv', 'text']), default='table', show_default=True, help='Output format')
@click.option('--output', type=click.Path(dir_okay=False), help='Write to this file instead of stdout')
def schedule(output_format, output, **kwargs):
    """Generates the repayment schedule."""
    loan, repayments, rate_changes = _build_inputs(**kwargs)
    rows = generate_schedule(loan, repayments, rate_changes)

    if output_format == 'csv':
        content = schedule_to_csv(rows)
    elif output_format == 'text':
        content = render_text_report(loan, rows)
    else:
        content = format_schedule_table(schedule_to_dataframe(rows)).to_string(index=False)

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(content)
        click.echo(f"Schedule written to {output}")
    else:
        click.echo(content)


@cli.command()
@loan_options
def summary(**kwargs):
    """Prints totals and the effective annual rate of the schedule."""
    loan, repayments, rate_changes = _build_inputs(**kwargs)
    rows = generate_schedule(loan, repayments, rate_changes)
    stats = summarize_schedule(rows)
    click.echo(f"Rows: {stats.scheduled_rows} scheduled, {stats.extra_rows} extra")
    click.echo(f"Total interest: {fmt_amount(stats.total_interest)}")
    click.echo(f"Total payment: {fmt_amount(stats.total_payment)}")
    click.echo(f"Total principal: {fmt_amount(stats.total_principal)}")
    click.echo(f"Final balance: {fmt_amount(stats.final_balance)}")
    if stats.last_payment_date:
        click.echo(f"Last payment: {stats.last_payment_date:%Y-%m-%d}")
    click.echo(f"Effective annual rate: {fmt_rate(calc_effective_annual_rate(loan, rows))}")


@cli.command()
@loan_options
@click.option('--output', type=click.Path(dir_okay=False), help='HTML file to write')
def chart(output, **kwargs):
    """Writes a principal/interest chart as HTML."""
    loan, repayments, rate_changes = _build_inputs(**kwargs)
    rows = generate_schedule(loan, repayments, rate_changes)
    if not rows:
        raise click.ClickException("Schedule is empty; nothing to chart.")
    fig = create_principal_interest_area(schedule_to_dataframe(rows))
    path = output or OUTPUT_DIR / DEFAULT_CHART_NAME.format(loan_id=loan.loan_id or 'Latest')
    save_chart_html(fig, path)
    click.echo(f"Chart written to {path}")


@cli.command()
@loan_options
@click.option('--output', type=click.Path(dir_okay=False), help='Text file to write')
@click.option('--all', 'export_all', is_flag=True, help='Export one plan per loan of --loan-file')
@click.option('--output-dir', type=click.Path(file_okay=False), help='Directory for the plans written by --all')
def export(output, export_all, output_dir, **kwargs):
    """Exports the plain-text repayment plan."""
    if export_all:
        if not kwargs['loan_file']:
            raise click.UsageError("--all requires --loan-file.")
        if output:
            raise click.UsageError("--all writes one file per loan; use --output-dir instead of --output.")
        loans = _read_loans(kwargs['loan_file'], **{name: kwargs[name] for name in MANUAL_LOAN_OPTIONS})
        repayments, rate_changes = _read_event_files(kwargs['repayments_file'], kwargs['rates_file'])
        paths = write_text_reports(loans, repayments, rate_changes, output_dir or OUTPUT_DIR)
        for path in paths:
            click.echo(f"Report written to {path}")
        click.echo(f"{len(paths)} report(s) exported")
        return

    loan, repayments, rate_changes = _build_inputs(**kwargs)
    rows = generate_schedule(loan, repayments, rate_changes)
    path = output or OUTPUT_DIR / DEFAULT_REPORT_NAME.format(loan_id=loan.loan_id or 'Latest')
    write_text_report(path, loan, rows)
    click.echo(f"Report written to {path}")


if __name__ == "__main__":
    cli()
