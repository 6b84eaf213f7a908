# expense_tracker/cli.py
import logging

import click
from dotenv import load_dotenv

from expense_tracker.config import load_config
from expense_tracker.core.aggregator import format_amount
from expense_tracker.database import ExpenseNotFoundError, ExpenseStore
from expense_tracker.outputs import get_chart
from expense_tracker.screen import ExpenseScreen, FormState

FILTER_CHOICE = click.Choice(['all', 'week', 'month'], case_sensitive=False)


def _screen(cfg):
    screen = ExpenseScreen(ExpenseStore(cfg['db_path']))
    screen.reload()
    return screen


def _submit(screen):
    if not screen.handle_submit():
        raise click.ClickException(screen.state.error)


@click.group()
@click.option(
    '--config', 'config_path',
    default='spendlog.yaml',
    type=click.Path(dir_okay=False),
    help='Path to a YAML config file (defaults are used if it does not exist)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with SPENDLOG_* overrides'
)
@click.option(
    '--db', 'db_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='SQLite database file (overrides config)'
)
@click.pass_context
def main(ctx, config_path, env_file, db_path):
    """Record expenses and see where the money goes."""
    if env_file:
        load_dotenv(env_file)

    cfg = load_config(config_path)
    if db_path:
        cfg['db_path'] = db_path
    logging.basicConfig(level=str(cfg.get('log_level', 'INFO')).upper())
    ctx.obj = cfg


@main.command()
@click.argument('amount')
@click.argument('category')
@click.option('--note', default='', help='Optional note')
@click.option('--date', 'expense_date', default='', help='Date as YYYY-MM-DD (default: today)')
@click.pass_obj
def add(cfg, amount, category, note, expense_date):
    """Add an expense."""
    screen = _screen(cfg)
    screen.state.form = FormState(
        amount=amount, category=category, note=note, date=expense_date
    )
    _submit(screen)
    click.echo(f"Added expense {screen.state.last_id}.")


@main.command()
@click.argument('expense_id', type=int)
@click.option('--amount', default=None)
@click.option('--category', default=None)
@click.option('--note', default=None)
@click.option('--date', 'expense_date', default=None)
@click.pass_obj
def edit(cfg, expense_id, amount, category, note, expense_date):
    """Replace fields of an existing expense; omitted fields keep their value."""
    screen = _screen(cfg)
    try:
        screen.start_edit(expense_id)
    except ExpenseNotFoundError as exc:
        raise click.ClickException(str(exc))

    form = screen.state.form
    if amount is not None:
        form.amount = amount
    if category is not None:
        form.category = category
    if note is not None:
        form.note = note
    if expense_date is not None:
        form.date = expense_date
    _submit(screen)
    click.echo(f"Updated expense {expense_id}.")


@main.command()
@click.argument('expense_id', type=int)
@click.pass_obj
def delete(cfg, expense_id):
    """Delete an expense."""
    screen = _screen(cfg)
    if not screen.delete(expense_id):
        raise click.ClickException(screen.state.error)
    click.echo(f"Deleted expense {expense_id}.")


@main.command(name='list')
@click.option('--filter', 'filter_mode', default='all', type=FILTER_CHOICE)
@click.pass_obj
def list_expenses(cfg, filter_mode):
    """List expenses, newest first."""
    screen = _screen(cfg)
    screen.set_filter(filter_mode)
    symbol = cfg.get('currency_symbol', '')
    expenses = screen.visible_expenses()
    if not expenses:
        click.echo("No expenses.")
        return
    for e in expenses:
        amount = format_amount(e.amount, symbol)
        line = f"{e.id:>5}  {e.date:<10}  {amount:>12}  {e.category}"
        if e.note:
            line += f"  ({e.note})"
        click.echo(line)


@main.command()
@click.option('--filter', 'filter_mode', default='all', type=FILTER_CHOICE)
@click.option('--chart', is_flag=True, default=False, help='Also draw a bar chart')
@click.pass_obj
def summary(cfg, filter_mode, chart):
    """Show the total and per-category totals."""
    screen = _screen(cfg)
    screen.set_filter(filter_mode)
    symbol = cfg.get('currency_symbol', '')
    result = screen.summary()

    click.echo(f"Total: {format_amount(result.total, symbol)}")
    for category, total in result.categories.items():
        click.echo(f"  {category}: {format_amount(total, symbol)}")

    if chart:
        renderer = get_chart('text', cfg)
        click.echo("")
        click.echo(renderer.render(result.labels, result.values))


@main.command()
@click.option('--host', default=None, help='Host to bind (default from config)')
@click.option('--port', default=None, type=int, help='Port to bind (default from config)')
@click.pass_obj
def serve(cfg, host, port):
    """Run the expense screen in the browser."""
    import uvicorn

    from expense_tracker.web import create_app

    host = host or cfg.get('host', '127.0.0.1')
    port = port or int(cfg.get('port', 8000))
    click.echo(f"Spendlog running at http://{host}:{port} (db: {cfg['db_path']})")
    uvicorn.run(create_app(cfg), host=host, port=port)
