import click

from bloodlink.commands import (
    create_requete_command,
    list_banks_command,
    list_donor_alertes_command,
    list_requetes_command,
    list_sent_alertes_command,
    login_command,
    logout_command,
    register_command,
    send_alerte_command,
    update_alerte_status_command,
    update_requete_status_command,
    validate_alerte_command,
    whoami_command,
)
from bloodlink.commands.constants import (
    BLOOD_GROUP_CHOICES,
    ROLE_CHOICES,
    STATUS_CHOICES,
)
from bloodlink.config import init_settings
from bloodlink.logger import get_logger

logger = get_logger()


@click.group()
@click.option(
    "--api-url",
    type=str,
    default=None,
    help="BloodLink server root (default: BLOODLINK_API_BASE_URL or the public server)",
)
def cli(api_url: str | None):
    """BloodLink: blood requests between doctors, blood banks and donors."""
    settings = init_settings(api_base_url=api_url)
    logger.debug(f"Using API at {settings.api_url}")


@cli.command()
@click.option("--email", prompt=True, help="Account email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
def login(email: str, password: str):
    """Log in and store the session tokens."""
    login_command(email, password)


@cli.command()
@click.option(
    "--role",
    type=click.Choice(ROLE_CHOICES, case_sensitive=True),
    required=True,
    help="Account type",
)
@click.option("--email", prompt=True, help="Account email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
@click.option("--nom", help="Last name, or the bank name")
@click.option("--prenom", help="First name (donors and doctors)")
@click.option(
    "--groupe-sanguin",
    type=click.Choice(BLOOD_GROUP_CHOICES, case_sensitive=False),
    help="Blood group (donors)",
)
@click.option("--code-inscription", help="Registration code (doctors and banks)")
@click.option("--banque-de-sang", type=int, help="Blood bank id (doctors)")
@click.option("--localisation", help="Location (banks)")
def register(role: str, **fields):
    """Create an account and log in."""
    if fields.get("groupe_sanguin"):
        fields["groupe_sanguin"] = fields["groupe_sanguin"].upper()
    register_command(role, **fields)


@cli.command()
def logout():
    """Forget the stored session."""
    logout_command()


@cli.command()
def whoami():
    """Show the logged-in user."""
    whoami_command()


@cli.command()
def banks():
    """List the registered blood banks."""
    list_banks_command()


@cli.group()
def requests():
    """Blood requests filed by doctors."""


@requests.command("list")
@click.option(
    "--bank-id",
    type=int,
    default=None,
    help="List the requests addressed to this bank instead of your own",
)
def list_requests(bank_id: int | None):
    """List your requests (doctor) or the requests addressed to a bank."""
    list_requetes_command(bank_id)


@requests.command("create")
@click.option(
    "--groupe-sanguin",
    type=click.Choice(BLOOD_GROUP_CHOICES, case_sensitive=False),
    required=True,
)
@click.option("--quantite", type=int, required=True, help="Number of units")
def create_request(groupe_sanguin: str, quantite: int):
    """File a new blood request."""
    create_requete_command(groupe_sanguin.upper(), quantite)


@requests.command("set-status")
@click.argument("requete_id", type=int)
@click.argument("statut", type=click.Choice(STATUS_CHOICES))
def set_request_status(requete_id: int, statut: str):
    """Change the status of a request."""
    update_requete_status_command(requete_id, statut)


@cli.group()
def alerts():
    """Alerts sent by blood banks to donors."""


@alerts.command("send")
@click.argument("requete_id", type=int)
@click.argument(
    "groupe_sanguin", type=click.Choice(BLOOD_GROUP_CHOICES, case_sensitive=False)
)
def send_alert(requete_id: int, groupe_sanguin: str):
    """Alert donors of a blood group about a request (bank)."""
    send_alerte_command(requete_id, groupe_sanguin.upper())


@alerts.command("sent")
@click.option("--bank-id", type=int, default=None, help="Defaults to your own bank")
def sent_alerts(bank_id: int | None):
    """List the alerts a bank has sent."""
    list_sent_alertes_command(bank_id)


@alerts.command("validate")
@click.argument("alerte_id", type=int)
def validate_alert(alerte_id: int):
    """Mark an alert as accepted once donors answered (bank)."""
    validate_alerte_command(alerte_id)


@alerts.command("list")
@click.option(
    "--groupe-sanguin",
    type=click.Choice(BLOOD_GROUP_CHOICES, case_sensitive=False),
    default=None,
    help="Defaults to your own blood group",
)
def list_alerts(groupe_sanguin: str | None):
    """List the alerts for a blood group (donor)."""
    list_donor_alertes_command(groupe_sanguin.upper() if groupe_sanguin else None)


@alerts.command("set-status")
@click.argument("alerte_id", type=int)
@click.argument("statut", type=click.Choice(STATUS_CHOICES))
def set_alert_status(alerte_id: int, statut: str):
    """Answer an alert (donor)."""
    update_alerte_status_command(alerte_id, statut)


def main():
    cli()


if __name__ == "__main__":
    main()
