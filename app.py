# app.py
# Suspicious-transaction analysis viewer
# - Customer picker fed by GET /customers (or free-text, per view preset)
# - POST /run with LLM backend choice and optional cache flag
# - Per-section rendering of the analysis result with empty states
# - Raw JSON fallback with copy button
# Run: streamlit run app.py

import html
from typing import List

import streamlit as st

from backend_client import BackendClient
from request_state import AnalysisSession, RunParams
from section_views import (
    DraftView,
    FeaturesView,
    Field,
    FieldsView,
    FindingsView,
    RawJsonView,
    RouteView,
    TableSectionView,
    fields_to_frame,
    render_result,
)
from settings import (
    BACKEND_URL,
    DEFAULT_LLM_MODEL,
    DEFAULT_USE_CACHE,
    LLM_MODELS,
    load_view_config,
    setup_logging,
)

# -------------------------
# CONFIGURATION
# -------------------------
setup_logging()
VIEW_CONFIG = load_view_config()

BADGE_STYLE = (
    "display:inline-block;padding:0.1rem 0.5rem;border-radius:0.35rem;"
    "background-color:#263238;color:#ffffff;font-size:0.75rem;"
)


# -------------------------
# SESSION STATE
# -------------------------
def _init_state():
    st.session_state.setdefault("customer_name", "")
    st.session_state.setdefault("llm_model", DEFAULT_LLM_MODEL)
    st.session_state.setdefault("use_cache", DEFAULT_USE_CACHE)
    if "analysis" not in st.session_state:
        session = AnalysisSession(BackendClient(), VIEW_CONFIG)
        if VIEW_CONFIG.customer_input == "select":
            with st.spinner("고객 리스트 로딩 중..."):
                session.fetch_customers()
        st.session_state["analysis"] = session


def _sync_params(session: AnalysisSession):
    session.params = RunParams(
        customer_name=st.session_state["customer_name"] or "",
        llm_model=st.session_state["llm_model"],
        use_cache=bool(st.session_state["use_cache"]),
    )


def _reset_all():
    st.session_state["analysis"].reset()
    st.session_state["customer_name"] = ""
    st.session_state["llm_model"] = DEFAULT_LLM_MODEL
    st.session_state["use_cache"] = DEFAULT_USE_CACHE


def _refresh_customers():
    st.session_state["analysis"].fetch_customers()


# -------------------------
# SECTION DRAWING
# -------------------------
def _show_fields(fields: List[Field]):
    if fields:
        st.dataframe(fields_to_frame(fields), hide_index=True, use_container_width=True)


def show_customer(view: FieldsView):
    st.subheader(view.title)
    if view.is_empty:
        st.caption(view.empty_message)
        return
    _show_fields(view.fields)


def show_transactions(view: TableSectionView):
    st.subheader(view.title)
    if view.is_empty:
        st.caption(view.empty_message)
        return
    st.dataframe(view.table.to_frame(), hide_index=True, use_container_width=True, height=384)


def show_features(view: FeaturesView):
    st.subheader(view.title)
    if view.is_empty:
        st.caption(view.empty_message)
        return
    _show_fields(view.fields)
    if view.beneficiaries is not None:
        st.markdown("**수취인별 금액**")
        st.dataframe(view.beneficiaries.to_frame(), hide_index=True, use_container_width=True)


def show_findings(view: FindingsView):
    st.subheader(view.title)
    if view.is_empty:
        st.caption(view.empty_message)
        return

    if view.evidence_empty_message:
        st.caption(view.evidence_empty_message)
    for card in view.evidences:
        with st.container(border=True):
            colL, colR = st.columns([4, 1])
            with colL:
                st.markdown(f"**{html.escape(card.detector)}**")
            with colR:
                if card.badge:
                    st.markdown(
                        f'<span style="{BADGE_STYLE}">{html.escape(card.badge)}</span>',
                        unsafe_allow_html=True,
                    )
            st.write(card.summary)
            if card.window:
                st.caption(card.window)
            if card.metrics:
                st.code(card.metrics, language="json")

    if view.scores is not None:
        st.markdown("**스코어**")
        _show_fields(view.scores)


def show_draft(view: DraftView):
    st.subheader(view.title)
    if view.is_empty:
        st.caption(view.empty_message)
        return

    colA, colB = st.columns(2)
    with colA:
        st.metric(view.risk_score.label, view.risk_score.value)
    with colB:
        if view.laws is not None:
            st.markdown("**관련 법조항**")
            for law in view.laws:
                st.markdown(f"- {law}")

    if view.sentences:
        st.markdown("**요약 문장**")
        for sentence in view.sentences:
            st.text(sentence)
    elif view.text:
        st.markdown("**요약**")
        st.text(view.text)


def show_route(view: RouteView):
    st.subheader(view.title)
    if view.is_empty:
        st.caption(view.empty_message)
        return
    st.metric(view.route.label, view.route.value)


def show_raw_json(view: RawJsonView):
    with st.expander(view.title):
        # st.code renders its own copy-to-clipboard button
        st.code(view.text, language="json")


# -------------------------
# STREAMLIT UI
# -------------------------
st.set_page_config(
    page_title="의심거래 분석 뷰",
    page_icon="🔎",
    layout="wide",
)
st.title("🔎 의심거래 분석 뷰")
st.caption("고객명을 입력해 분석 결과를 조회합니다.")

_init_state()
session: AnalysisSession = st.session_state["analysis"]

col1, col2, col3 = st.columns(3)
with col1:
    if VIEW_CONFIG.customer_input == "select":
        options = [""] + session.customers
        if st.session_state["customer_name"] not in options:
            st.session_state["customer_name"] = ""
        st.selectbox(
            "고객명",
            options,
            key="customer_name",
            format_func=lambda name: name or "고객을 선택하세요",
            disabled=session.customers_slot.loading,
        )
    else:
        st.text_input("고객명", key="customer_name", placeholder="예: 정우성")
with col2:
    st.selectbox("LLM 모델", LLM_MODELS, key="llm_model")
with col3:
    if VIEW_CONFIG.cache_toggle:
        st.selectbox(
            "캐시 사용",
            [True, False],
            key="use_cache",
            format_func=lambda flag: "true" if flag else "false",
        )

_sync_params(session)

colB1, colB2, colB3 = st.columns([1, 1, 2])
with colB1:
    run_clicked = st.button(
        "조회하기",
        type="primary",
        disabled=session.analysis_slot.loading or not session.params.is_ready(),
    )
with colB2:
    st.button("초기화", on_click=_reset_all)
with colB3:
    if VIEW_CONFIG.customer_input == "select":
        st.button(
            "고객 리스트 새로고침",
            on_click=_refresh_customers,
            disabled=session.customers_slot.loading,
        )

if run_clicked:
    with st.spinner("조회 중..."):
        session.run_analysis()

if session.customers_slot.error:
    st.error(f"고객 리스트 오류: {session.customers_slot.error}")
if session.analysis_slot.error:
    st.error(f"오류: {session.analysis_slot.error}")

result = session.result
if result is not None:
    st.markdown("---")
    view = render_result(result, VIEW_CONFIG)
    show_customer(view.customer)
    show_transactions(view.transactions)
    show_features(view.features)
    show_findings(view.findings)
    show_draft(view.draft)
    show_route(view.route)
    show_raw_json(view.raw)

st.markdown("---")
st.caption(
    f"백엔드: {BACKEND_URL} · GET /customers, POST /run "
    "(요청 바디: { customer_name, llm_model, use_cache })"
)
