"""
section_views.py
Projects a NormalizedResult into view models the Streamlit shell can draw
without further checks. Renderers are pure: no I/O, no Streamlit calls.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from result_schema import (
    TRANSACTION_KEYS,
    Evidence,
    FeatureSummary,
    Findings,
    NormalizedResult,
    Present,
    ReportDraft,
    Section,
    SentencesBody,
    TextBody,
)
from settings import ViewConfig
from view_format import (
    NA,
    format_duration_hours,
    format_grouped_number,
    format_risk_score,
    format_scalar,
    is_number,
    mask_account_like,
    pretty_json,
)

# -------------------------
# Section titles & empty states
# -------------------------
CUSTOMER_TITLE = "고객 정보"
TRANSACTIONS_TITLE = "거래 내역"
FEATURES_TITLE = "특성 요약"
FINDINGS_TITLE = "탐지 결과"
DRAFT_TITLE = "보고서 초안"
ROUTE_TITLE = "라우팅 정보"
RAW_TITLE = "원본 JSON 보기"

CUSTOMER_EMPTY = "고객 정보가 없습니다."
TRANSACTIONS_EMPTY = "거래 내역이 없습니다."
FEATURES_EMPTY = "특성 요약 정보가 없습니다."
FINDINGS_EMPTY = "탐지 결과가 없습니다."
EVIDENCE_EMPTY = "탐지 증거가 없습니다."
DRAFT_EMPTY = "보고서 초안이 없습니다."
ROUTE_EMPTY = "라우팅 정보가 없습니다."

# Counterparty columns where the backend writes "nan" for not-applicable
MASKED_TRANSACTION_KEYS = {"상대은행", "상대계좌"}
AMOUNT_KEY = "금액"

BENEFICIARY_HEADERS = ["수취인", "금액"]


# -------------------------
# View models
# -------------------------
@dataclass
class Field:
    label: str
    value: str


@dataclass
class TableView:
    headers: List[str]
    rows: List[List[str]] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=self.headers)


def fields_to_frame(fields: List[Field]) -> pd.DataFrame:
    return pd.DataFrame([[f.label, f.value] for f in fields], columns=["항목", "값"])


@dataclass
class SectionView:
    title: str
    # set only when the section has nothing to show
    empty_message: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.empty_message is not None


@dataclass
class FieldsView(SectionView):
    fields: List[Field] = field(default_factory=list)


@dataclass
class TableSectionView(SectionView):
    table: Optional[TableView] = None


@dataclass
class FeaturesView(SectionView):
    fields: List[Field] = field(default_factory=list)
    beneficiaries: Optional[TableView] = None


@dataclass
class EvidenceCard:
    detector: str
    summary: str
    badge: Optional[str] = None
    window: Optional[str] = None
    metrics: Optional[str] = None


@dataclass
class FindingsView(SectionView):
    evidences: List[EvidenceCard] = field(default_factory=list)
    evidence_empty_message: Optional[str] = None
    scores: Optional[List[Field]] = None


@dataclass
class DraftView(SectionView):
    risk_score: Optional[Field] = None
    laws: Optional[List[str]] = None
    sentences: Optional[List[str]] = None
    text: Optional[str] = None


@dataclass
class RouteView(SectionView):
    route: Optional[Field] = None


@dataclass
class RawJsonView:
    title: str
    text: str


@dataclass
class ResultView:
    customer: FieldsView
    transactions: TableSectionView
    features: FeaturesView
    findings: FindingsView
    draft: DraftView
    route: RouteView
    raw: RawJsonView

    def sections(self) -> List[SectionView]:
        return [self.customer, self.transactions, self.features, self.findings, self.draft, self.route]


# -------------------------
# Cell helpers
# -------------------------
def _or_na(value: Any) -> str:
    return format_scalar(value, missing=NA)


def _number_or_na(value: Any) -> str:
    return NA if value is None else format_grouped_number(value)


def transaction_cell(row: Dict[str, Any], key: str) -> str:
    value = row.get(key)
    if key == AMOUNT_KEY:
        return format_grouped_number(value)
    if key in MASKED_TRANSACTION_KEYS:
        value = mask_account_like(value)
    return format_scalar(value)


def beneficiary_amount(value: Any) -> str:
    """Numeric strings are grouped like numbers; anything else keeps its own text."""
    if is_number(value):
        return format_grouped_number(value)
    if isinstance(value, bool) or value is None:
        return format_scalar(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return format_scalar(value)
    if not math.isfinite(number):
        return format_scalar(value)
    return format_grouped_number(int(number) if number.is_integer() else number)


# -------------------------
# Renderers
# -------------------------
def render_customer(section: Section) -> FieldsView:
    if not isinstance(section, Present):
        return FieldsView(title=CUSTOMER_TITLE, empty_message=CUSTOMER_EMPTY)
    fields = [Field(str(key), format_scalar(value)) for key, value in section.value.items()]
    return FieldsView(title=CUSTOMER_TITLE, fields=fields)


def render_transactions(section: Section) -> TableSectionView:
    if not isinstance(section, Present):
        return TableSectionView(title=TRANSACTIONS_TITLE, empty_message=TRANSACTIONS_EMPTY)
    rows = [[transaction_cell(row, key) for key in TRANSACTION_KEYS] for row in section.value]
    return TableSectionView(
        title=TRANSACTIONS_TITLE,
        table=TableView(headers=list(TRANSACTION_KEYS), rows=rows),
    )


def render_beneficiaries(section: Section) -> Optional[TableView]:
    if not isinstance(section, Present):
        return None
    rows = [[str(name), beneficiary_amount(amount)] for name, amount in section.value.items()]
    return TableView(headers=list(BENEFICIARY_HEADERS), rows=rows)


def render_features(section: Section) -> FeaturesView:
    if not isinstance(section, Present):
        return FeaturesView(title=FEATURES_TITLE, empty_message=FEATURES_EMPTY)

    f: FeatureSummary = section.value
    fields = [
        Field("총입금", _number_or_na(f.sum_in)),
        Field("총출금", _number_or_na(f.sum_out)),
        Field("패스스루비율", _or_na(f.pass_through_ratio)),
        Field("기간", f"{_or_na(f.start_ts)} ~ {_or_na(f.end_ts)}"),
        Field("거래건수(PAY)", _or_na(f.pay_count)),
        Field("PAY 최소/중앙값/최대", f"{_or_na(f.pay_min)} / {_or_na(f.pay_median)} / {_or_na(f.pay_max)}"),
        Field("야간거래건수", _or_na(f.night_pay_count)),
        Field("개설→첫거래(시간)", format_duration_hours(f.first_tx_delta_hours)),
        Field("개설→폐쇄(시간)", format_duration_hours(f.open_to_close_hours)),
        Field("KPay 메모 존재", _or_na(f.has_kppay_memo)),
    ]
    if f.top_beneficiary_masked:
        fields.append(Field("주요 수취인", f.top_beneficiary_masked))

    return FeaturesView(
        title=FEATURES_TITLE,
        fields=fields,
        beneficiaries=render_beneficiaries(f.beneficiaries),
    )


def render_evidence(evidence: Evidence) -> EvidenceCard:
    window = None
    if evidence.window is not None:
        window = f"{format_scalar(evidence.window.start)} ~ {format_scalar(evidence.window.end)}"
    return EvidenceCard(
        detector=format_scalar(evidence.detector),
        summary=format_scalar(evidence.summary),
        # zero is a real severity and still gets a badge
        badge=f"severity {format_scalar(evidence.severity)}" if evidence.severity is not None else None,
        window=window,
        metrics=pretty_json(evidence.metrics) if evidence.metrics else None,
    )


def render_findings(section: Section) -> FindingsView:
    if not isinstance(section, Present):
        return FindingsView(title=FINDINGS_TITLE, empty_message=FINDINGS_EMPTY)

    findings: Findings = section.value
    scores = None
    if isinstance(findings.scores, Present):
        scores = [Field(str(name), format_scalar(value)) for name, value in findings.scores.value.items()]

    return FindingsView(
        title=FINDINGS_TITLE,
        evidences=[render_evidence(e) for e in findings.evidences],
        evidence_empty_message=None if findings.evidences else EVIDENCE_EMPTY,
        scores=scores,
    )


def render_draft(section: Section, config: ViewConfig) -> DraftView:
    if not isinstance(section, Present):
        return DraftView(title=DRAFT_TITLE, empty_message=DRAFT_EMPTY)

    draft: ReportDraft = section.value
    view = DraftView(
        title=DRAFT_TITLE,
        risk_score=Field("Risk Score", format_risk_score(draft.risk_score, config.score_precision)),
        laws=[format_scalar(law) for law in draft.laws] if draft.laws is not None else None,
    )
    body = draft.body
    if isinstance(body, SentencesBody):
        view.sentences = [format_scalar(s) for s in body.sentences]
    elif isinstance(body, TextBody):
        view.text = body.text
    return view


def render_route(section: Section) -> RouteView:
    if isinstance(section, Present) and section.value.route:
        return RouteView(title=ROUTE_TITLE, route=Field("Route", section.value.route))
    return RouteView(title=ROUTE_TITLE, empty_message=ROUTE_EMPTY)


def render_raw_json(result: NormalizedResult) -> RawJsonView:
    return RawJsonView(title=RAW_TITLE, text=pretty_json(result.raw))


def render_result(result: NormalizedResult, config: Optional[ViewConfig] = None) -> ResultView:
    config = config or ViewConfig()
    return ResultView(
        customer=render_customer(result.customer),
        transactions=render_transactions(result.transactions),
        features=render_features(result.features),
        findings=render_findings(result.findings),
        draft=render_draft(result.draft, config),
        route=render_route(result.draft),
        raw=render_raw_json(result),
    )
