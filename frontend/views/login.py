import streamlit as st

from config import API_URL, APP_NAME
from utils.api import APIClient
from utils.notifications import queue_toast

api = APIClient(API_URL)


def _error(result: dict, fallback: str) -> str:
    data = result.get("data") or {}
    return data.get("detail", result.get("error", fallback))


def _open_session(result: dict, email: str) -> None:
    """Keep the token and the session it encodes, then rerun into the app."""
    st.session_state.token = result["data"]["access_token"]
    st.session_state.session = result["data"]["session"]
    st.session_state["is_authenticated"] = True
    name = st.session_state.session["user"].get("full_name") or email
    queue_toast(f"Welcome back, {name}", icon="✅")
    st.rerun()


def _login_form():
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        if not st.form_submit_button("Sign in"):
            return

    if not (email and password):
        st.warning("Enter your email and password")
        return

    result = api.login(email, password)
    if result["status"] == 200:
        _open_session(result, email)
    else:
        st.error(f"Sign in failed: {_error(result, 'Sign in failed')}")


def _register_form():
    with st.form("register_form"):
        full_name = st.text_input("Full name")
        email = st.text_input("Email", key="reg_email")
        password = st.text_input("Password", type="password", key="reg_password")
        confirm = st.text_input("Confirm password", type="password")
        if not st.form_submit_button("Create account"):
            return

    if not (email and password and confirm):
        st.warning("Email and both password fields are required")
    elif password != confirm:
        st.error("Passwords do not match")
    else:
        result = api.register(email, password, full_name or None)
        if result["status"] == 201:
            st.success("Account created, you can sign in now.")
        else:
            st.error(f"Registration failed: {_error(result, 'Registration failed')}")


def render():
    st.title(APP_NAME)
    sign_in, sign_up = st.tabs(["Sign in", "Create account"])
    with sign_in:
        _login_form()
    with sign_up:
        _register_form()
