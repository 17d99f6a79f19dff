"""Streamlit client for registering, logging in with an access code and editing a profile."""
from __future__ import annotations

import streamlit as st

from api_client import error_message, get_client
from state import clear_user, init_session_state, set_user


def render_register(client):
    st.header("Register")
    with st.form("register_form"):
        email = st.text_input("Email", placeholder="you@email.com")
        submitted = st.form_submit_button("Register")
        if submitted:
            try:
                res = client.register(email)
                st.success(f"Code sent to {email}. Check your inbox.")
                if res.get("dev_code"):
                    st.info(f"Development code: {res['dev_code']} ({res.get('dev_note', '')})")
            except Exception as e:
                st.error(f"Register failed: {error_message(e)}")


def render_login(client):
    st.header("Login")
    with st.form("login_form"):
        code = st.text_input("Code", placeholder="A01-1")
        submitted = st.form_submit_button("Login")
        if submitted:
            try:
                res = client.login(code)
                set_user(res["user"]["code"], res["user"])
                st.success("Logged in")
            except Exception as e:
                st.error(f"Login failed: {error_message(e)}")


def render_profile(client):
    st.header("My profile")
    if not st.session_state.user_code:
        st.info("Login first.")
        return

    user = st.session_state.user or {}
    st.write(f"Code: {st.session_state.user_code}")
    if st.button("Logout"):
        clear_user()
        st.rerun()

    if user.get("image_url"):
        st.image(user["image_url"], width=160)
    else:
        st.caption("No image")

    with st.form("profile_form"):
        name = st.text_input("Name", value=user.get("name", ""))
        last_name = st.text_input("Last name", value=user.get("last_name", ""))
        uploaded = st.file_uploader("Profile image", type=["jpg", "jpeg", "png", "gif", "webp"])
        submitted = st.form_submit_button("Save changes")
        if submitted:
            image = (uploaded.name, uploaded.getvalue(), uploaded.type) if uploaded else None
            try:
                res = client.update_user(st.session_state.user_code, name, last_name, image)
                set_user(st.session_state.user_code, res["user"])
                st.success("Profile updated")
            except Exception as e:
                st.error(f"Update failed: {error_message(e)}")


def main():
    st.set_page_config(page_title="UserApp", layout="centered")
    init_session_state()
    client = get_client()
    # Refresh the cached profile from the backend on every run
    if st.session_state.user_code:
        try:
            set_user(st.session_state.user_code, client.get_user(st.session_state.user_code))
        except Exception:
            clear_user()

    page = st.sidebar.radio("Navigation", ["Register", "Login", "Profile"])

    if page == "Register":
        render_register(client)
    elif page == "Login":
        render_login(client)
    elif page == "Profile":
        render_profile(client)


if __name__ == "__main__":
    main()
