import asyncio
from typing import List

import pandas as pd
import streamlit as st

import config
from parsing.models import ParseReport
from services.importer import blank_report, import_resume, status_message
from services.text_source import AcquisitionError
from utils.logger import get_logger, setup_logging

setup_logging(config.LOG_LEVEL, config.LOG_FILE)
logger = get_logger(__name__)

# --- Page Config & Theme ---
st.set_page_config(
    page_title="Resume Editor · Import",
    page_icon="📄",
    layout="wide",
)

CUSTOM_CSS = """
<style>
:root { --radius: 16px; --ring: 1px solid rgba(255,255,255,0.06); }
.block-container { padding-top: 1.25rem; max-width: 1100px; }
header { visibility: hidden; }

.stepper { display:flex; gap:.5rem; margin-bottom: .75rem; }
.step {
  padding: .45rem .85rem; border-radius: 999px;
  font-weight: 700; opacity:.7; border: var(--ring); background: #12141A;
}
.step.active { opacity:1; background: linear-gradient(90deg, rgba(30,121,255,.25), rgba(139,92,246,.25)); }

[data-testid="stFileUploader"] { border-radius: var(--radius); border: var(--ring); background: #10141c; }
.small { opacity: 0.75; font-size: 0.9rem; }
</style>
"""
st.markdown(CUSTOM_CSS, unsafe_allow_html=True)


# --- Session State ---
def _init_state():
    ss = st.session_state
    ss.setdefault("step", 1)
    ss.setdefault("report", None)


_init_state()

STEPS = [(1, "Import"), (2, "Review")]


def stepper():
    st.markdown('<div class="stepper">', unsafe_allow_html=True)
    cols = st.columns(len(STEPS))
    for i, (num, label) in enumerate(STEPS):
        with cols[i]:
            cls = "step active" if st.session_state.step == num else "step"
            st.markdown(f"<div class='{cls}'> {num}. {label} </div>", unsafe_allow_html=True)
    st.markdown('</div>', unsafe_allow_html=True)


# --- Step 1: Import ---
def step_import():
    st.subheader("1) Import an existing resume")
    st.info("Importing is best effort. Anything we can't read reliably is left blank for you to fill in.")
    file = st.file_uploader("Drop your resume (PDF/TXT/CSV)", type=["pdf", "txt", "csv"], accept_multiple_files=False)
    if file is None:
        return

    if st.button("Import", type="primary"):
        with st.spinner("Reading your resume…"):
            try:
                report = asyncio.run(import_resume(file.name, file.getvalue()))
            except AcquisitionError as e:
                logger.warning("Import of %s failed: %s", file.name, e)
                st.error(f"Couldn't read this file: {e}")
                return
        st.session_state.report = report
        st.session_state.step = 2
        st.rerun()

    if st.button("Skip and start from a blank form"):
        st.session_state.report = blank_report()
        st.session_state.step = 2
        st.rerun()


# --- Step 2: Review ---
def _frame(rows: List[dict], columns: List[str]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=columns) if rows else pd.DataFrame(columns=columns)


def step_review():
    st.subheader("2) Review")
    report: ParseReport = st.session_state.report
    if report is None:
        st.info("Import a resume first.")
        return

    if report.status == "ok":
        st.success(status_message(report))
    elif report.status == "skipped":
        st.info(status_message(report))
    else:
        st.warning(status_message(report))
    for hint in report.hints:
        st.warning(hint)

    record = report.record
    pi = record.personal_info
    col1, col2, col3 = st.columns(3)
    with col1:
        st.text_input("Full name", pi.full_name, disabled=True)
        st.text_input("Email", pi.email, disabled=True)
    with col2:
        st.text_input("Phone", pi.phone, disabled=True)
        st.text_input("Location", pi.location, disabled=True)
    with col3:
        st.text_input("LinkedIn", pi.linked_in, disabled=True)
        st.text_input("Website", pi.website, disabled=True)
    st.text_area("Professional summary", pi.summary, height=100, disabled=True)

    st.markdown("### Experience")
    st.dataframe(
        _frame(
            [e.model_dump(exclude={"id", "responsibilities"}) for e in record.experience],
            ["position", "company", "location", "start_date", "end_date", "current"],
        ),
        width="stretch",
        hide_index=True,
    )
    for e in record.experience:
        with st.expander(f"{e.position} @ {e.company}"):
            for r in e.responsibilities:
                st.markdown(f"- {r}")

    st.markdown("### Education")
    st.dataframe(
        _frame(
            [e.model_dump(exclude={"id"}) for e in record.education],
            ["degree", "field", "institution", "graduation_date", "gpa"],
        ),
        width="stretch",
        hide_index=True,
    )

    st.markdown("### Skills")
    for cat in record.skills:
        st.markdown(f"**{cat.category}:** {', '.join(cat.skills)}")

    st.download_button(
        "Open in editor (JSON)",
        data=record.model_dump_json(by_alias=True, indent=2),
        file_name="resume.json",
        mime="application/json",
        type="primary",
    )

    with st.expander("Import diagnostics", expanded=False):
        st.caption(f"Quality score: {report.score}")
        st.dataframe(_frame([t.model_dump() for t in report.trace], ["stage", "outcome", "detail"]), width="stretch", hide_index=True)

    if st.button("Import another file"):
        st.session_state.report = None
        st.session_state.step = 1
        st.rerun()


# --- Router ---
stepper()

if st.session_state.step == 1:
    step_import()
else:
    step_review()
