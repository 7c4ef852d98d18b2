"""Streamlit UI for emo."""

from __future__ import annotations

import streamlit as st

from emo.ai import AiEmojiSelector
from emo.catalog import load_catalog
from emo.errors import EmoError
from emo.memo import MemoStore
from emo.resolve import ResolutionResult, resolve_with_store

SEARCH_MODE = "Search"
AI_MODE = "AI sentence"


st.set_page_config(page_title="emo — find the right emoji", layout="centered")
st.title("emo")
st.caption(
    "Search the bundled emoji catalog by name, keyword or description. Saved memos "
    "(`emo -m`) come first. AI mode asks a local language model for a sentence of "
    "distinct emoji and reports an error instead of guessing when the model fails."
)


def render_results(results: ResolutionResult) -> None:
    if not results:
        st.info("No emoji matched that query.")
        return
    for position, (char, record) in enumerate(results, start=1):
        if record is None:
            st.write(f"{position}. {char} _(memo)_")
        else:
            st.write(f"{position}. {char} {record['name']}")


with st.form("query_form"):
    query = st.text_input("Query", placeholder="e.g. fire, red heart, a vampire eating a pear").strip()
    count = int(st.number_input("Results", min_value=1, max_value=20, value=3, step=1))
    mode = st.radio("Mode", [SEARCH_MODE, AI_MODE], horizontal=True)
    submitted = st.form_submit_button("Find")

if submitted:
    if not query:
        st.error("Please provide a search term or situation.")
    else:
        try:
            store = MemoStore.load()
            if mode == AI_MODE:
                with st.spinner("Asking the model..."):
                    sentence = AiEmojiSelector(store.model).generate_emoji_sentence(query, count)
                st.success(sentence)
            else:
                render_results(resolve_with_store(load_catalog(), store, query, count))
        except EmoError as exc:
            st.error(f"Error: {exc}")
else:
    st.info("Enter a query above and click **Find** to get started.")
