# streamlit_app.py
import streamlit as st
from googleapiclient.errors import HttpError

import config
from digests import iter_digests, mark_read
from gmail_client import GmailClient
from options import DigestOptions

st.set_page_config(layout="wide", page_title="Inbox Digest")


@st.cache_resource
def get_client():
    return GmailClient()


gmail = get_client()

st.title("Inbox Digest")

if "digests" not in st.session_state:
    st.session_state["digests"] = []

col1, col2 = st.columns([1, 3])
with col1:
    q = st.text_input("Gmail query:", value=config.GMAIL_QUERY, key="query_input")
    defaults = DigestOptions.from_env()
    line_limit = st.number_input("Lines per message", min_value=0, max_value=200, value=defaults.line_limit,
                                 key="line_limit_input")
    col_limit = st.number_input("Characters per line", min_value=0, max_value=400, value=defaults.col_limit,
                                key="col_limit_input")
    omit_links = st.checkbox("Omit links", value=defaults.omit_links, key="omit_links_input")
    if st.button("Scan Inbox", key="scan_button"):
        options = DigestOptions(
            line_limit=int(line_limit),
            col_limit=int(col_limit),
            skip_html=defaults.skip_html,
            omit_links=omit_links,
            pretty_tables=defaults.pretty_tables,
            allow_non_letter_lines=defaults.allow_non_letter_lines,
        )
        with st.spinner("Fetching and digesting messages..."):
            try:
                st.session_state["digests"] = list(iter_digests(gmail, options, query=q))
                st.success(f"{len(st.session_state['digests'])} unread messages.")
            except HttpError as e:
                st.error(f"Gmail request failed: {e}")

    if st.session_state["digests"] and st.button("Mark all read", key="mark_read_button"):
        with st.spinner("Marking messages read..."):
            marked = mark_read(gmail, [mid for mid, _ in st.session_state["digests"]])
        st.success(f"Marked {marked} messages read.")
        st.session_state["digests"] = []
        st.rerun()

with col2:
    st.header("Digests")
    digests = st.session_state.get("digests", [])
    for mid, digest in digests:
        first_line = digest.split("\n", 1)[0]
        with st.expander(first_line or mid):
            st.text(digest)
    if not digests:
        st.info("Scan your inbox to see digests.")
