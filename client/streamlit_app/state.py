"""Session state helpers for Streamlit."""
from __future__ import annotations

import streamlit as st


def init_session_state() -> None:
    defaults = {
        "user_code": None,
        "user": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def set_user(code: str, user: dict) -> None:
    st.session_state.user_code = code
    st.session_state.user = user


def clear_user() -> None:
    st.session_state.user_code = None
    st.session_state.user = None
