# frontend/streamlit_app.py

import os
import time
import streamlit as st
import requests

from api_client import BackendClient

st.set_page_config(page_title="📈 FinPrep Resume Review", layout="wide")

# Backend URL (can be set via env BACKEND_URL)
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")

st.title("📈 FinPrep: Resume Analysis")
st.caption(f"Backend: {BACKEND_URL}")

with st.expander("ℹ️ Instructions", expanded=False):
    st.markdown("""
    1) Paste your **access token** (from the sign-in page).
    2) Pick a registered resume, or register a new one by URL.
    3) Click **Analyze Resume**. The job is queued and picked up by the scheduler;
       this page polls until it is **completed** or **failed**.
    4) A failed analysis shows the reason. Submit again to start a new job.
    """)

token = st.text_input("Access token", type="password", key="token")
client = BackendClient(base_url=BACKEND_URL, token=token or None)

st.markdown("---")

# ---------- Session state ----------
if "job_history" not in st.session_state:
    # list of dicts: {"id": str, "resume": str, "ts": float}
    st.session_state.job_history = []

def _push_history(job_id: str, resume_name: str):
    st.session_state.job_history = [
        j for j in st.session_state.job_history if j["id"] != job_id
    ]
    st.session_state.job_history.insert(0, {"id": job_id, "resume": resume_name, "ts": time.time()})
    st.session_state.job_history = st.session_state.job_history[:20]

def _error_text(e: Exception) -> str:
    resp = getattr(e, "response", None)
    if resp is not None:
        try:
            body = resp.json()
            return body.get("details") or body.get("error") or resp.text
        except ValueError:
            return resp.text
    return str(e)

def _render_download(job_id: str, key: str):
    # The report route needs the bearer token, so fetch the bytes here instead of linking out
    try:
        pdf = client.download_report(job_id, "pdf")
    except requests.RequestException as e:
        st.error(f"Report unavailable: {_error_text(e)}")
        return
    st.download_button(
        "⬇️ Download Report (PDF)",
        data=pdf,
        file_name=f"resume_analysis_{job_id}.pdf",
        mime="application/pdf",
        key=key,
    )

def _render_result(result: dict):
    score = result.get("overallScore")
    if score is not None:
        st.metric("Overall score", f"{score}/100")
    if result.get("summary"):
        st.markdown(result["summary"])

    c_left, c_right = st.columns(2)
    with c_left:
        st.markdown("#### ✅ Strengths")
        for s in result.get("strengths") or []:
            st.write(f"- {s}")
    with c_right:
        st.markdown("#### 🛠️ Improvements")
        for s in result.get("areasForImprovement") or []:
            st.write(f"- {s}")

    edits = result.get("suggestedEdits") or []
    if edits:
        st.markdown("#### ✏️ Suggested edits")
        for e in edits:
            st.write(f"~~{e.get('original', '')}~~")
            st.write(f"**{e.get('improved', '')}**")
            if e.get("explanation"):
                st.caption(e["explanation"])

    with st.expander("👀 Raw result", expanded=False):
        st.json(result)

# ---------- Resume selection ----------
resume_id = None
resume_name = ""
if token:
    try:
        resumes = client.list_resumes()
    except requests.RequestException as e:
        resumes = []
        st.error(f"Could not load resumes: {_error_text(e)}")

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("📄 Your resumes")
        if resumes:
            labels = {f"{r['fileName']} · {r['createdAt'][:19]}": r for r in resumes}
            choice = st.selectbox("Resume", list(labels.keys()))
            resume_id = labels[choice]["id"]
            resume_name = labels[choice]["fileName"]
            try:
                latest = client.latest_analysis(resume_id)
            except requests.RequestException as e:
                latest = None
                st.caption(f"Latest analysis unavailable: {_error_text(e)}")
            if latest:
                with st.expander(f"🗂️ Latest analysis · {latest['updatedAt'][:19]}", expanded=False):
                    _render_result(latest.get("analysisResult") or {})
        else:
            st.info("No resumes registered yet.")

    with col2:
        st.subheader("➕ Register a resume")
        new_name = st.text_input("File name", placeholder="jane_doe_resume.pdf")
        new_url = st.text_input("File URL")
        new_type = st.selectbox(
            "File type",
            [
                "application/pdf",
                "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                "text/plain",
            ],
        )
        if st.button("Register", disabled=not (new_name and new_url)):
            try:
                client.register_resume(new_name, new_type, new_url)
                st.success("Resume registered.")
                st.rerun()
            except requests.RequestException as e:
                st.error(f"Registration failed: {_error_text(e)}")
else:
    st.warning("Enter an access token to continue.")

st.markdown("---")

# ---------- Target ----------
st.subheader("🎯 Target")
t1, t2, t3 = st.columns(3)
with t1:
    job_role = st.text_input("Role", placeholder="Investment Banking Analyst")
with t2:
    industry = st.text_input("Industry", placeholder="Investment Banking")
with t3:
    experience_level = st.selectbox("Experience level", ["", "Intern", "Entry-level", "Associate", "Senior"])

output = st.empty()

def _run_analysis(resume_id: str, resume_name: str):
    with output.container():
        st.info("Submitting analysis job...")
        try:
            job_id = client.create_analysis_job(
                resume_id,
                job_role=job_role or None,
                industry=industry or None,
                experience_level=experience_level or None,
            )
        except requests.RequestException as e:
            st.error(f"Failed to submit job: {_error_text(e)}")
            return

        st.success(f"Job submitted. ID: `{job_id}`")
        _push_history(job_id, resume_name)
        prog = st.progress(0)
        status_box = st.empty()

        def on_tick(elapsed, status):
            pct = min(100, int((elapsed / 120.0) * 100))
            prog.progress(pct)
            status_box.write(f"⏳ Elapsed: {int(elapsed)}s · Status: **{status}**")

        with st.spinner("Waiting for the analysis..."):
            res = client.wait_with_progress(job_id, total_wait=300.0, poll_interval=3.0, on_tick=on_tick)

        prog.progress(100)
        status = res.get("status")
        if status == "completed":
            secs = res.get("processingTimeSec")
            st.success(f"✅ Analysis complete{f' in {secs}s' if secs is not None else ''}")
            _render_result(res.get("result") or {})
            _render_download(job_id, key="latest")
        elif status == "failed":
            st.error(f"❌ Analysis failed: {res.get('error')}")
            st.caption("Submit again to start a new analysis.")
        else:
            st.warning(f"Job is still {status}. It will keep running; check back in the history below.")
        st.write("---")

if st.button("🚀 Analyze Resume", disabled=not (token and resume_id), use_container_width=True):
    _run_analysis(resume_id, resume_name)

# ---------- History ----------
if st.session_state.job_history:
    st.markdown("---")
    st.subheader("📜 Job History")

    for i, item in enumerate(st.session_state.job_history[:10], start=1):
        job_id = item["id"]
        ts = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(item["ts"]))

        c_left, c_mid, c_right = st.columns([4, 2, 2])
        with c_left:
            st.write(f"**{i}.** `{job_id}`  ·  *{item['resume']}*  ·  {ts}")
        with c_mid:
            refresh = st.button("Refresh", key=f"refresh-{job_id}")
        with c_right:
            if refresh:
                try:
                    status = client.job_status(job_id).get("status")
                    st.write(f"Status: **{status}**")
                    if status == "completed":
                        _render_download(job_id, key=f"dl-{job_id}")
                except requests.RequestException as e:
                    st.write(_error_text(e))

# ---------- Mock interview ----------
if token:
    st.markdown("---")
    st.subheader("🎤 Mock Interview")
    i1, i2 = st.columns(2)
    with i1:
        iv_company = st.text_input("Company", placeholder="Goldman Sachs", key="iv_company")
        iv_role = st.text_input("Role", placeholder="Investment Banking Analyst", key="iv_role")
    with i2:
        iv_type = st.selectbox("Interview type", ["mixed", "technical", "behavioral"], key="iv_type")
        iv_count = st.number_input("Questions", min_value=1, max_value=30, value=5, key="iv_count")
    iv_description = st.text_area("Job description (optional)", key="iv_description")

    if st.button("Generate Questions", disabled=not (iv_company and iv_role)):
        try:
            with st.spinner("Generating interview questions..."):
                interview = client.generate_interview(
                    iv_company, iv_role, int(iv_count), iv_type, job_description=iv_description or None
                )
        except requests.RequestException as e:
            st.error(f"Could not generate interview: {_error_text(e)}")
        else:
            st.success(f"Interview `{interview['id']}` ready.")
            for n, q in enumerate(interview.get("questions") or [], start=1):
                st.write(f"**{n}.** {q.get('question', '')}")
                st.caption(f"{q.get('difficulty', '')} · {q.get('category', '')}")

# ---------- Networking message ----------
if token:
    st.markdown("---")
    st.subheader("🤝 Networking Message")
    n1, n2 = st.columns(2)
    with n1:
        nw_company = st.text_input("Company", placeholder="Evercore", key="nw_company")
        nw_role = st.text_input("Role", placeholder="M&A Analyst", key="nw_role")
    with n2:
        nw_contact = st.text_input("Contact name (optional)", key="nw_contact")
        nw_type = st.selectbox(
            "Message type",
            ["intro_email", "linkedin_message", "cover_letter"],
            key="nw_type",
        )
    nw_resume_text = st.text_area("Resume text", height=200, key="nw_resume_text")

    if st.button("Draft Message", disabled=not (nw_company and nw_role and nw_resume_text)):
        try:
            with st.spinner("Drafting message..."):
                draft = client.generate_networking_message(
                    nw_company, nw_role, nw_resume_text, nw_type, contact_name=nw_contact or None
                )
        except requests.RequestException as e:
            st.error(f"Could not draft message: {_error_text(e)}")
        else:
            if draft.get("subject"):
                st.markdown(f"**Subject:** {draft['subject']}")
            st.code(draft.get("message", ""), language=None)
