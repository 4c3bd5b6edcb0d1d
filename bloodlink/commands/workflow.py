"""Doctor, blood bank and donor workflows driven from the command line."""

from typing import Optional

import click

from bloodlink.api.models import BloodGroup, Status
from bloodlink.auth.models import BankProfile, DonorProfile
from bloodlink.auth.session import AuthSession
from bloodlink.commands.common import (
    echo_summary,
    format_alerte,
    format_requete,
    require_login,
    run_with_session,
)


def list_banks_command() -> None:
    async def action(session: AuthSession):
        return await session.banks.list()

    banks = run_with_session(action)
    if not banks:
        click.echo("No blood banks registered")
        return
    for bank in banks:
        location = f" ({bank.localisation})" if bank.localisation else ""
        click.echo(f"#{bank.id}  {bank.nom}{location}")


def _resolve_bank_id(session: AuthSession, bank_id: Optional[int]) -> int:
    """Use the given bank id, or the logged-in bank's own id."""
    if bank_id is not None:
        return bank_id
    require_login(session)
    if isinstance(session.user, BankProfile) and session.user.id is not None:
        return session.user.id
    raise click.UsageError("--bank-id is required unless logged in as a blood bank")


def list_requetes_command(bank_id: Optional[int] = None) -> None:
    """List the doctor's own requests, or the requests addressed to a bank."""

    async def action(session: AuthSession):
        if bank_id is None and not isinstance(session.user, BankProfile):
            return await session.doctor.list_requetes()
        return await session.bank.list_requetes(_resolve_bank_id(session, bank_id))

    requetes = run_with_session(action)
    if not requetes:
        click.echo("No requests")
        return
    for requete in requetes:
        click.echo(format_requete(requete))
    echo_summary(requetes)


def create_requete_command(groupe_sanguin: str, quantite: int) -> None:
    async def action(session: AuthSession):
        require_login(session)
        return await session.doctor.create_requete(BloodGroup(groupe_sanguin), quantite)

    requete = run_with_session(action)
    click.echo(f"Request created: {format_requete(requete)}")


def update_requete_status_command(requete_id: int, statut: str) -> None:
    async def action(session: AuthSession):
        return await session.doctor.update_statut(requete_id, Status.normalize(statut))

    requete = run_with_session(action)
    click.echo(f"Request updated: {format_requete(requete)}")


def send_alerte_command(requete_id: int, groupe_sanguin: str) -> None:
    async def action(session: AuthSession):
        await session.bank.creer_alerte(requete_id, BloodGroup(groupe_sanguin))

    run_with_session(action)
    click.echo(f"Alert sent to {groupe_sanguin} donors for request #{requete_id}")


def list_sent_alertes_command(bank_id: Optional[int] = None) -> None:
    async def action(session: AuthSession):
        return await session.bank.list_alertes_envoyees(
            _resolve_bank_id(session, bank_id)
        )

    alertes = run_with_session(action)
    if not alertes:
        click.echo("No alerts sent")
        return
    for alerte in alertes:
        click.echo(format_alerte(alerte))
    echo_summary(alertes)


def validate_alerte_command(alerte_id: int) -> None:
    async def action(session: AuthSession):
        await session.bank.valider_requete(alerte_id)

    run_with_session(action)
    click.echo(f"Alert #{alerte_id} accepted")


def list_donor_alertes_command(groupe_sanguin: Optional[str] = None) -> None:
    """List alerts for a blood group, defaulting to the logged-in donor's group."""

    async def action(session: AuthSession):
        if groupe_sanguin is not None:
            groupe = BloodGroup(groupe_sanguin)
        else:
            require_login(session)
            user = session.user
            if not isinstance(user, DonorProfile) or user.groupe_sanguin is None:
                raise click.UsageError(
                    "--groupe-sanguin is required unless logged in as a donor"
                )
            groupe = user.groupe_sanguin
        return await session.donor.list_alertes(groupe)

    alertes = run_with_session(action)
    if not alertes:
        click.echo("No alerts")
        return
    for alerte in alertes:
        click.echo(format_alerte(alerte))
    echo_summary(alertes)


def update_alerte_status_command(alerte_id: int, statut: str) -> None:
    async def action(session: AuthSession):
        return await session.donor.update_statut(alerte_id, Status.normalize(statut))

    alerte = run_with_session(action)
    click.echo(f"Alert updated: {format_alerte(alerte)}")
