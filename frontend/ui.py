"""
Streamlit frontend for the ABCU course planner.

Talks to the FastAPI service (python -m app.app):
    POST /load, GET /courses, GET /courses/{number}

    streamlit run frontend/ui.py
"""

import os
from urllib.parse import quote

import requests
import streamlit as st

API_URL = os.getenv("CATALOG_API_URL", "http://localhost:8000").rstrip("/")
DEFAULT_FILE = "CS 300 ABCU_Advising_Program_Input"


def _call(method: str, path: str, **kwargs) -> dict | None:
    """Send a request to the API; show the error and return None on failure."""
    try:
        resp = requests.request(method, f"{API_URL}{path}", timeout=30, **kwargs)
    except requests.exceptions.ConnectionError:
        st.error("Cannot reach the API. Start it with: python -m app.app")
        return None

    if resp.status_code >= 400:
        try:
            detail = resp.json().get("detail", resp.text)
        except ValueError:
            detail = resp.text
        st.error(f"{resp.status_code}: {detail}")
        return None
    return resp.json()


st.set_page_config(page_title="ABCU Course Planner", layout="centered")
st.title("ABCU Course Planner")

# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------

with st.sidebar:
    st.header("Catalog")
    file_name = st.text_input(
        "File name (case-insensitive, with or without .csv)", value=DEFAULT_FILE
    )
    if st.button("Load"):
        data = _call("POST", "/load", json={"file": file_name})
        if data is not None:
            st.success(f"Loaded {data['loaded']} courses from {data['file']}.")
            for s in data.get("skipped", []):
                st.warning(f"Line {s['line_no']} skipped: {s['text']!r}")

# ---------------------------------------------------------------------------
# Course list
# ---------------------------------------------------------------------------

st.subheader("Course list")
if st.button("Print Course List"):
    data = _call("GET", "/courses")
    if data is not None:
        rows = [{"Number": c["number"], "Title": c["title"]} for c in data["courses"]]
        if rows:
            st.dataframe(rows, use_container_width=True, hide_index=True)
        else:
            st.info("The catalog is empty.")

# ---------------------------------------------------------------------------
# Single course
# ---------------------------------------------------------------------------

st.subheader("Course details")
number = st.text_input("What course do you want to know about?", placeholder="e.g. csci300")
if st.button("Print Course"):
    if not number.strip():
        st.warning("Please enter a course number.")
    else:
        data = _call("GET", f"/courses/{quote(number.strip(), safe='')}")
        if data is not None:
            st.markdown(f"**{data['number']}**, {data['title']}")
            prereqs = data.get("prerequisites", [])
            if not prereqs:
                st.write("Prerequisites: None")
            else:
                st.write("Prerequisites:")
                for p in prereqs:
                    title = p["title"] if p["resolved"] else "None Required"
                    st.write(f"- {p['number']}: {title}")
