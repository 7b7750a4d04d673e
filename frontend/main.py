import streamlit as st
from streamlit_option_menu import option_menu

from config import API_URL, APP_NAME
from utils.api import APIClient
from utils.notifications import flush_toasts, queue_toast
from utils.styles import inject_styles
from views import admin_health, dashboard, login

api = APIClient(API_URL)

SESSION_DEFAULTS = {
    "is_authenticated": False,
    "token": None,
    "session": None,
    "theme": "light",
    "nav_page": "Dashboard",
}


def init_session():
    for key, value in SESSION_DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = value


def current_role() -> str:
    session = st.session_state.get("session") or {}
    return (session.get("user") or {}).get("role", "FREE")


def sync_session() -> bool:
    """Reload the session from the token; False once the token is rejected."""
    result = api.get_session()
    if result["status"] == 200:
        st.session_state["session"] = result["data"]
        return True
    return result["status"] == 0


def logout():
    for key in ("token", "session"):
        st.session_state[key] = None
    st.session_state["is_authenticated"] = False
    st.session_state["nav_page"] = "Dashboard"
    queue_toast("Signed out", icon="👋")
    st.rerun()


def main():
    st.set_page_config(page_title=APP_NAME, layout="wide")
    init_session()
    inject_styles(st.session_state["theme"])
    flush_toasts()

    if not st.session_state["is_authenticated"]:
        login.render()
        st.stop()

    if not sync_session():
        queue_toast("Session expired, please sign in again", icon="⏰")
        logout()

    with st.sidebar:
        nav_options = ["Dashboard"]
        icons = ["speedometer2"]
        if current_role() == "ADMIN":
            nav_options.append("Admin Health")
            icons.append("heart-pulse")
        nav_options.append("Logout")
        icons.append("box-arrow-right")

        current_page = st.session_state.get("nav_page", "Dashboard")
        default_index = nav_options.index(current_page) if current_page in nav_options else 0

        page_selected = option_menu(
            menu_title=APP_NAME,
            options=nav_options,
            icons=icons,
            default_index=default_index,
            key="main_nav",
        )

        dark = st.toggle("Dark theme", value=st.session_state["theme"] == "dark")
        theme = "dark" if dark else "light"
        if theme != st.session_state["theme"]:
            st.session_state["theme"] = theme
            st.rerun()

    if page_selected == "Logout":
        logout()

    st.session_state["nav_page"] = page_selected

    if page_selected == "Admin Health":
        admin_health.render()
    else:
        dashboard.render()


if __name__ == "__main__":
    main()
