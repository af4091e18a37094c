import click
from flask.cli import AppGroup

from locadora.models import User
from locadora.services import ObligationService

obligations_cli = AppGroup("obligations", help="Payment obligation maintenance.")


@obligations_cli.command("overdue")
@click.option("--owner-email", required=True, help="Account whose obligations are listed.")
def overdue_command(owner_email):
    """List pending obligations whose due date has passed."""
    owner = User.query.filter_by(email=owner_email.strip().lower()).first()
    if not owner:
        raise click.ClickException(f"No account registered for {owner_email}.")

    rows = ObligationService.list_overdue(owner.id)
    if not rows:
        click.echo("No overdue obligations.")
        return
    for obligation in rows:
        click.echo(
            f"{obligation.id}\trental={obligation.rental_id}\tsequence={obligation.sequence}"
            f"\tamount={obligation.amount}\tdue_at={obligation.due_at}"
        )
    click.echo(f"{len(rows)} overdue obligation(s).")


def register_commands(app):
    app.cli.add_command(obligations_cli)
