import asyncio
from typing import Awaitable, Callable, Iterable, TypeVar

import click
import httpx
from pydantic import ValidationError

from bloodlink.api.exceptions import ApiError, UnauthorizedError
from bloodlink.api.models import Alerte, Requete, summarize_statuses
from bloodlink.auth.session import AuthSession, create_session
from bloodlink.commands.constants import SESSION_EXPIRED_MESSAGE, STATUS_LABELS
from bloodlink.logger import get_logger

logger = get_logger()

T = TypeVar("T")


def run_with_session(action: Callable[[AuthSession], Awaitable[T]]) -> T:
    """
    Run an async action against a freshly restored session.

    API and network failures are turned into ClickException so the CLI
    exits with a readable message instead of a traceback.
    """

    async def _run() -> T:
        async with create_session() as session:
            return await action(session)

    try:
        return asyncio.run(_run())
    except UnauthorizedError as e:
        logger.debug(f"Unauthorized: {e}")
        raise click.ClickException(SESSION_EXPIRED_MESSAGE) from e
    except ApiError as e:
        raise click.ClickException(str(e)) from e
    except httpx.HTTPError as e:
        raise click.ClickException(f"Could not reach the BloodLink API: {e}") from e
    except ValidationError as e:
        raise click.ClickException(f"Unexpected response from the API: {e}") from e


def require_login(session: AuthSession) -> None:
    if not session.is_authenticated or session.user is None:
        raise click.ClickException(SESSION_EXPIRED_MESSAGE)


def format_requete(requete: Requete) -> str:
    line = (
        f"#{requete.id}  {requete.groupe_sanguin.value:<4} x{requete.quantite}  "
        f"[{STATUS_LABELS[requete.statut]}]"
    )
    docteur = requete.docteur
    if docteur and docteur.display_name:
        line += f"  Dr {docteur.display_name}"
        if docteur.banque and docteur.banque.nom:
            line += f" - {docteur.banque.nom}"
    if requete.date_requete:
        line += f"  ({requete.date_requete})"
    return line


def format_alerte(alerte: Alerte) -> str:
    groupe = alerte.groupe_sanguin or (alerte.requete and alerte.requete.groupe_sanguin)
    line = f"#{alerte.id}  {groupe.value if groupe else '?':<4} [{STATUS_LABELS[alerte.statut]}]"
    if alerte.requete:
        line += f"  request #{alerte.requete.id}"
        if alerte.requete.quantite is not None:
            line += f" x{alerte.requete.quantite}"
        banque = alerte.requete.docteur.banque if alerte.requete.docteur else None
        if banque and banque.nom:
            line += f"  {banque.nom}"
            if banque.localisation:
                line += f" ({banque.localisation})"
    if alerte.date_envoi:
        line += f"  sent {alerte.date_envoi}"
    return line


def echo_summary(items: Iterable) -> None:
    counts = summarize_statuses(items)
    parts = [f"{STATUS_LABELS[status]}: {count}" for status, count in counts.items()]
    click.echo(" | ".join(parts))
