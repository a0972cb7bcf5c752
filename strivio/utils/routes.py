# strivio/utils/routes.py
LOGIN = "login"
SIGNUP = "signup"
FORGOT_PASSWORD = "forgot-password"
DASHBOARD = "dashboard"
PROJECTS = "project"
TASKS = "task"

# pages reachable without a session
PUBLIC_ROUTES = frozenset({LOGIN, SIGNUP, FORGOT_PASSWORD})

TASK_FILTER_PARAM = "project_id"


def is_public(route: str) -> bool:
    return route in PUBLIC_ROUTES
