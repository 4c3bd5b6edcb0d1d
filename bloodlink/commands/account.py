import click
from pydantic import ValidationError

from bloodlink.api.exceptions import UnauthorizedError
from bloodlink.auth.models import (
    BankProfile,
    BankRegistration,
    DoctorProfile,
    DoctorRegistration,
    DonorProfile,
    DonorRegistration,
    Registration,
    UserType,
)
from bloodlink.auth.session import AuthSession
from bloodlink.commands.common import run_with_session
from bloodlink.logger import get_logger

logger = get_logger()


def login_command(email: str, password: str) -> None:
    async def action(session: AuthSession):
        try:
            return await session.login(email, password)
        except UnauthorizedError as e:
            logger.debug(f"Login rejected for {email}: {e.detail}")
            raise click.ClickException("Invalid email or password") from e

    user = run_with_session(action)
    click.echo(f"Logged in as {user.display_name} ({user.user_type})")


def build_registration(role: str, **fields) -> Registration:
    """Build the role-specific registration payload from CLI options."""
    fields = {k: v for k, v in fields.items() if v is not None}
    match UserType(role):
        case UserType.DONOR:
            return DonorRegistration(**fields)
        case UserType.DOCTOR:
            return DoctorRegistration(**fields)
        case UserType.BANK:
            return BankRegistration(**fields)


def _option_name(loc) -> str:
    """CLI option for a registration field, reported by name or by wire alias."""
    for model in (DonorRegistration, DoctorRegistration, BankRegistration):
        for name, field in model.model_fields.items():
            if loc in (name, field.alias):
                return "--" + name.replace("_", "-")
    return f"--{loc}"


def register_command(role: str, **fields) -> None:
    try:
        registration = build_registration(role, **fields)
    except ValidationError as e:
        missing = ", ".join(_option_name(error["loc"][0]) for error in e.errors())
        raise click.UsageError(f"Missing or invalid options for {role}: {missing}")

    async def action(session: AuthSession):
        return await session.register(registration)

    user = run_with_session(action)
    click.echo(f"Account created for {user.display_name} ({user.user_type})")


def logout_command() -> None:
    async def action(session: AuthSession):
        session.logout()

    run_with_session(action)
    click.echo("Logged out")


def whoami_command() -> None:
    async def action(session: AuthSession):
        return session.user if session.is_authenticated else None

    user = run_with_session(action)
    if user is None:
        click.echo("Not logged in")
        return

    click.echo(f"{user.display_name} <{user.email or '?'}>")
    click.echo(f"Role: {user.user_type}")
    if isinstance(user, DonorProfile) and user.groupe_sanguin:
        click.echo(f"Blood group: {user.groupe_sanguin.value}")
    elif isinstance(user, DoctorProfile):
        if user.code_inscription:
            click.echo(f"Registration code: {user.code_inscription}")
        if user.banque_de_sang is not None:
            click.echo(f"Blood bank: #{user.banque_de_sang}")
    elif isinstance(user, BankProfile) and user.localisation:
        click.echo(f"Location: {user.localisation}")
