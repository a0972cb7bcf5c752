# strivio/models/__init__.py
from .project import ProjectForm
from .task import TaskForm, TASK_STATUSES, STATUS_LABELS, STATUS_COLORS
from .user import CredentialsForm, Identity
from .validation import validate_form
