# main.py

#============================================================#
#                       Strivio-Tasks                        #
#============================================================#
# Author      : Aktham Almomani                              #
# Created     : 2025-10-15                                   #
# Version     : V1.0.0                                       #
#------------------------------------------------------------#
# Purpose     : Strivio-Tasks is a lightweight project and   #
#               task tracker: sign in, then create, edit and #
#               delete projects and their tasks (Supabase or #
#               local SQLite powered)                        #
#============================================================#

import logging

import streamlit as st

from strivio.config import load_settings
from strivio.ui import common
from strivio.ui.auth_pages import render_login, render_signup
from strivio.ui.dashboard import render_dashboard
from strivio.ui.projects_panel import render_projects_page
from strivio.ui.tasks_panel import render_tasks_page
from strivio.utils import routes

st.set_page_config(
    page_title="Strivio - Tasks",
    layout="wide",
    initial_sidebar_state="collapsed",
)

settings = load_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ======================  ROUTES  ======================
pages = {
    routes.DASHBOARD: st.Page(render_dashboard, title="Dashboard", url_path=routes.DASHBOARD, default=True),
    routes.PROJECTS: st.Page(render_projects_page, title="Projects", url_path=routes.PROJECTS),
    routes.TASKS: st.Page(render_tasks_page, title="Tasks", url_path=routes.TASKS),
    routes.LOGIN: st.Page(render_login, title="Sign in", url_path=routes.LOGIN),
    routes.SIGNUP: st.Page(render_signup, title="Sign up", url_path=routes.SIGNUP),
}
common.register_pages(pages)
current = st.navigation(list(pages.values()))

# ======================  SESSION GATE  ======================
tab = common.tab_state(settings)
redirect = tab.session.mount(common.route_of(current))
if redirect:
    common.go(redirect)

current.run()
