"""
result_schema.py
Turns the loosely-structured JSON returned by POST /run into a normalized
result where every section is either Present(value) or ABSENT.

normalize_result never raises: anything of the wrong shape is dropped to
ABSENT and the untouched JSON is kept on the result for the raw view.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from view_format import is_number

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ===========================================================
# Tagged sections
# ===========================================================
@dataclass(frozen=True)
class Present(Generic[T]):
    value: T


class Absent:
    """Marker for a section that is missing or failed validation."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = Absent()

Section = Union[Present[T], Absent]


# ===========================================================
# Result model
# ===========================================================
# Fixed ledger columns, in display order
TRANSACTION_KEYS = [
    "계좌번호",
    "거래일시",
    "입출금여부",
    "금액",
    "적요코드",
    "상대은행",
    "상대계좌",
    "상대계좌명",
    "통장표시내용",
]


@dataclass
class Window:
    start: Any = None
    end: Any = None


@dataclass
class Evidence:
    detector: Any = None
    summary: Any = None
    # only real numbers survive; "high" or True become None
    severity: Optional[Union[int, float]] = None
    window: Optional[Window] = None
    metrics: Optional[Dict[str, Any]] = None


@dataclass
class Findings:
    evidences: List[Evidence] = field(default_factory=list)
    scores: Section = ABSENT


@dataclass
class FeatureSummary:
    sum_in: Any = None
    sum_out: Any = None
    pass_through_ratio: Any = None
    start_ts: Any = None
    end_ts: Any = None
    pay_count: Any = None
    pay_min: Any = None
    pay_median: Any = None
    pay_max: Any = None
    night_pay_count: Any = None
    first_tx_delta_hours: Any = None
    open_to_close_hours: Any = None
    has_kppay_memo: Any = None
    top_beneficiary_masked: Optional[str] = None
    beneficiaries: Section = ABSENT


@dataclass(frozen=True)
class SentencesBody:
    sentences: List[Any]


@dataclass(frozen=True)
class TextBody:
    text: str


class NoBody:
    def __repr__(self) -> str:
        return "NO_BODY"


NO_BODY = NoBody()

DraftBody = Union[SentencesBody, TextBody, NoBody]


@dataclass
class ReportDraft:
    risk_score: Any = None
    laws: Optional[List[Any]] = None
    body: DraftBody = NO_BODY
    route: Optional[str] = None


@dataclass
class NormalizedResult:
    customer: Section = ABSENT
    transactions: Section = ABSENT
    features: Section = ABSENT
    findings: Section = ABSENT
    draft: Section = ABSENT
    # unwrapped analysis object, shown verbatim by the raw JSON view
    raw: Any = None
    # full response body as received
    payload: Any = None


# ===========================================================
# Helpers
# ===========================================================
def _pick(mapping: Dict[str, Any], *keys: str) -> Any:
    """First non-None value among alternate key spellings."""
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def _drop(section: str, expected: str, value: Any) -> Absent:
    if value is not None:
        logger.debug(
            "Dropping section %s: expected %s, got %s", section, expected, type(value).__name__
        )
    return ABSENT


def _label(value: Any) -> Optional[str]:
    if value is None or value == "" or isinstance(value, (dict, list, bool)):
        return None
    return str(value)


def unwrap_run_response(body: Any) -> Any:
    """POST /run answers either {"result": {...}} or the result itself."""
    if isinstance(body, dict) and body.get("result"):
        return body["result"]
    return body


# ===========================================================
# Section normalizers
# ===========================================================
def normalize_customer(value: Any) -> Section:
    if not isinstance(value, dict):
        return _drop("customer_raw", "mapping", value)
    return Present(dict(value))


def normalize_transactions(value: Any) -> Section:
    if not isinstance(value, list):
        return _drop("tx_raw", "sequence", value)
    if not value:
        return ABSENT
    # keep row count and order; a malformed row becomes a row of blanks
    rows = [dict(row) if isinstance(row, dict) else {} for row in value]
    return Present(rows)


def normalize_features(value: Any) -> Section:
    if not isinstance(value, dict):
        return _drop("features", "mapping", value)

    beneficiaries = value.get("beneficiaries")
    summary = FeatureSummary(
        sum_in=value.get("sum_in"),
        sum_out=value.get("sum_out"),
        pass_through_ratio=value.get("pass_through_ratio"),
        start_ts=value.get("start_ts"),
        end_ts=value.get("end_ts"),
        pay_count=value.get("pay_count"),
        pay_min=value.get("pay_min"),
        pay_median=value.get("pay_median"),
        pay_max=value.get("pay_max"),
        night_pay_count=value.get("night_pay_count"),
        first_tx_delta_hours=value.get("first_tx_delta_hours"),
        open_to_close_hours=value.get("open_to_close_hours"),
        has_kppay_memo=_pick(value, "has_kppay_memo", "has_kpay_memo"),
        top_beneficiary_masked=_label(_pick(value, "top_beneficiary_masked", "top_beneficiary")),
        beneficiaries=(
            Present(dict(beneficiaries))
            if isinstance(beneficiaries, dict)
            else _drop("features.beneficiaries", "mapping", beneficiaries)
        ),
    )
    return Present(summary)


def normalize_evidence(item: Any) -> Optional[Evidence]:
    if not isinstance(item, dict):
        logger.debug("Skipping evidence entry of type %s", type(item).__name__)
        return None

    severity = item.get("severity")
    window = item.get("window")
    metrics = item.get("metrics")
    return Evidence(
        detector=item.get("detector"),
        summary=item.get("summary"),
        severity=severity if is_number(severity) else None,
        window=Window(start=window.get("start"), end=window.get("end")) if isinstance(window, dict) else None,
        metrics=metrics if isinstance(metrics, dict) and metrics else None,
    )


def normalize_findings(value: Any) -> Section:
    if not isinstance(value, dict):
        return _drop("findings", "mapping", value)

    raw_evidences = _pick(value, "evidences", "evidence")
    evidences: List[Evidence] = []
    if isinstance(raw_evidences, list):
        for item in raw_evidences:
            evidence = normalize_evidence(item)
            if evidence is not None:
                evidences.append(evidence)

    scores = value.get("scores")
    return Present(
        Findings(
            evidences=evidences,
            scores=Present(dict(scores)) if isinstance(scores, dict) else _drop("findings.scores", "mapping", scores),
        )
    )


def resolve_draft_body(draft: Dict[str, Any]) -> DraftBody:
    """Non-empty sentences win over draft_text; otherwise text, otherwise nothing."""
    sentences = draft.get("sentences")
    if isinstance(sentences, list) and sentences:
        return SentencesBody(list(sentences))
    text = _pick(draft, "draft_text", "text")
    if isinstance(text, str) and text:
        return TextBody(text)
    return NO_BODY


def normalize_draft(value: Any) -> Section:
    if not isinstance(value, dict):
        return _drop("draft", "mapping", value)

    laws = value.get("laws")
    return Present(
        ReportDraft(
            risk_score=value.get("risk_score"),
            laws=list(laws) if isinstance(laws, list) else None,
            body=resolve_draft_body(value),
            route=_label(value.get("route")),
        )
    )


def normalize_result(body: Any) -> NormalizedResult:
    """Normalize a POST /run response body (wrapped or bare)."""
    raw = unwrap_run_response(body)
    if not isinstance(raw, dict):
        _drop("result", "mapping", raw)
        return NormalizedResult(raw=raw, payload=body)

    return NormalizedResult(
        customer=normalize_customer(raw.get("customer_raw")),
        transactions=normalize_transactions(raw.get("tx_raw")),
        features=normalize_features(raw.get("features")),
        findings=normalize_findings(raw.get("findings")),
        draft=normalize_draft(raw.get("draft")),
        raw=raw,
        payload=body,
    )
