import html

import streamlit as st

from config import API_URL
from utils.accessibility import get_accessible_badge_styles
from utils.api import APIClient
from utils.notifications import queue_toast

api = APIClient(API_URL)

STATUS_BADGES = {
    "healthy": "CORRECT",
    "degraded": "PENDING",
    "unknown": "PENDING",
    "unhealthy": "INCORRECT",
}


def _badge(status: str) -> str:
    style = get_accessible_badge_styles(STATUS_BADGES.get(status, "default"))
    return f'<span class="op-badge {style}">{html.escape(str(status))}</span>'


def service_line(service: dict) -> str:
    """One health check entry; name and details may carry raw error text."""
    name = html.escape(str(service["name"]))
    details = html.escape(str(service.get("details") or ""))
    return f"**{name}** {_badge(service['status'])} <span class='text-gray-700'>{details}</span>"


def render():
    st.title("System health")

    if st.button("Start background services"):
        result = api.start_services()
        if result["status"] == 200:
            queue_toast(result["data"]["message"], icon="🚀")
            st.rerun()
        else:
            data = result.get("data") or {}
            st.error(data.get("details") or data.get("detail") or result.get("error", "Failed to start services"))

    result = api.get_admin_health_check()
    data = result.get("data")
    if result["status"] == 0 or not data:
        st.error(result.get("error", "Health check unavailable"))
        return

    if result["status"] == 500:
        st.error(f"{data.get('error')}: {data.get('details')}")
    else:
        st.markdown(f"Overall: {_badge(data['overall'])}", unsafe_allow_html=True)

    database = data.get("database", {})
    if database.get("connected"):
        st.caption(f"Database connected ({database.get('latency')} ms)")
    else:
        st.caption("Database unreachable")

    for service in data.get("services", []):
        st.markdown(service_line(service), unsafe_allow_html=True)

    env = data.get("environment", {})
    st.caption(f"{env.get('environment')} on {env.get('platform')} at {data.get('timestamp')}")
