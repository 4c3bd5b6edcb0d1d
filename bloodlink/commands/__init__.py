from .account import login_command, logout_command, register_command, whoami_command
from .workflow import (
    create_requete_command,
    list_banks_command,
    list_donor_alertes_command,
    list_requetes_command,
    list_sent_alertes_command,
    send_alerte_command,
    update_alerte_status_command,
    update_requete_status_command,
    validate_alerte_command,
)

__all__ = [
    "create_requete_command",
    "list_banks_command",
    "list_donor_alertes_command",
    "list_requetes_command",
    "list_sent_alertes_command",
    "login_command",
    "logout_command",
    "register_command",
    "send_alerte_command",
    "update_alerte_status_command",
    "update_requete_status_command",
    "validate_alerte_command",
    "whoami_command",
]
