"""
Toast queue that survives ``st.rerun()``.

Views enqueue messages before rerunning; the shell flushes them on the next
run so the toast is not lost with the discarded page.
"""
from typing import Any, MutableMapping, Optional

import streamlit as st

TOAST_KEY = "toasts"


def _state(state: Optional[MutableMapping[str, Any]]) -> MutableMapping[str, Any]:
    return st.session_state if state is None else state


def queue_toast(message: str, icon: Optional[str] = None, state=None) -> None:
    _state(state).setdefault(TOAST_KEY, []).append({"message": message, "icon": icon})


def flush_toasts(state=None) -> int:
    """Show and clear queued toasts; returns how many were shown."""
    pending = _state(state).pop(TOAST_KEY, [])
    for toast in pending:
        st.toast(toast["message"], icon=toast["icon"])
    return len(pending)
