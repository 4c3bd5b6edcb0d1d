from bloodlink.api.models import BloodGroup, Status
from bloodlink.auth.models import UserType

ROLE_CHOICES = [role.value for role in UserType]
BLOOD_GROUP_CHOICES = [group.value for group in BloodGroup]
STATUS_CHOICES = [status.value for status in Status]

STATUS_LABELS = {
    Status.EN_ATTENTE: "en attente",
    Status.ENVOYEE: "envoyée",
    Status.ACCEPTEE: "acceptée",
    Status.COMPLETED: "terminée",
}

SESSION_EXPIRED_MESSAGE = "Not logged in or session expired. Run 'bloodlink login'."
