"""Pytest configuration and shared fixtures for the analysis viewer tests."""

from unittest.mock import Mock

import pytest

from backend_client import BackendClient


@pytest.fixture
def full_result():
    """Analysis result with every section populated."""
    return {
        "customer_raw": {"고객명": "정우성", "나이": 34, "휴면여부": False},
        "tx_raw": [
            {
                "계좌번호": "110-123-456789",
                "거래일시": "2024-03-01 09:12:00",
                "입출금여부": "입금",
                "금액": 1500000,
                "적요코드": "PAY",
                "상대은행": "nan",
                "상대계좌": "nan",
                "상대계좌명": "김철수",
                "통장표시내용": "카카오페이",
            },
            {
                "계좌번호": "110-123-456789",
                "거래일시": "2024-03-01 09:40:00",
                "입출금여부": "출금",
                "금액": 1490000,
                "적요코드": "TRF",
                "상대은행": "국민은행",
                "상대계좌": "123-45-6789",
                "상대계좌명": "이영희",
                "통장표시내용": "이체",
            },
        ],
        "features": {
            "sum_in": 1500000,
            "sum_out": 1490000,
            "pass_through_ratio": 0.993,
            "start_ts": "2024-03-01 09:12:00",
            "end_ts": "2024-03-01 09:40:00",
            "pay_count": 1,
            "pay_min": 1500000,
            "pay_median": 1500000,
            "pay_max": 1500000,
            "night_pay_count": 0,
            "first_tx_delta_hours": 2.75,
            "open_to_close_hours": 49.5,
            "has_kppay_memo": True,
            "top_beneficiary_masked": "이*희",
            "beneficiaries": {"이영희": 1490000, "박민수": "12000", "기타": "unknown"},
        },
        "findings": {
            "evidences": [
                {
                    "detector": "pass_through",
                    "summary": "입금 직후 대부분 출금",
                    "severity": 0.8,
                    "window": {"start": "2024-03-01 09:12", "end": "2024-03-01 09:40"},
                    "metrics": {"ratio": 0.993},
                },
                {"detector": "night_activity", "summary": "야간 거래 없음", "severity": 0},
                {"detector": "memo_keyword", "summary": "메모 키워드", "severity": "high"},
            ],
            "scores": {"pass_through": 0.8, "total": 1.2},
        },
        "draft": {
            "risk_score": 0.87654,
            "laws": ["특정금융정보법 제4조"],
            "sentences": ["입금 후 즉시 출금되었습니다.", "대포통장 의심 정황이 있습니다."],
            "draft_text": "무시되어야 하는 본문",
            "route": "STR",
        },
    }


@pytest.fixture
def empty_result():
    """Result where every section is empty or null."""
    return {"customer_raw": {}, "tx_raw": [], "features": None, "findings": None, "draft": None}


def _make_response(status_code=200, json_body=None, text="", reason="OK"):
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.text = text
    if isinstance(json_body, Exception):
        response.json.side_effect = json_body
    else:
        response.json.return_value = json_body
    return response


@pytest.fixture
def make_response():
    """Factory for fake requests.Response objects."""
    return _make_response


@pytest.fixture
def http_session():
    """Stand-in for requests.Session; set http_session.request.return_value per test."""
    session = Mock()
    session.headers = {}
    return session


@pytest.fixture
def client(http_session):
    return BackendClient(base_url="http://backend.test", timeout=None, session=http_session)
