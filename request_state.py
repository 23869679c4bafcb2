"""
request_state.py
Loading / error / success bookkeeping for the two backend calls, plus the
operator's run parameters.

Each call type owns a RequestSlot:

    IDLE -> LOADING -> SUCCESS | FAILED -> (reset) IDLE

Starting a request hands out a new request id. A completion carrying an older
id is ignored, so a slow response cannot overwrite the state of a newer
request or of a reset.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from backend_client import BackendClient, BackendError
from result_schema import NormalizedResult, normalize_result
from settings import DEFAULT_LLM_MODEL, DEFAULT_USE_CACHE, LLM_MODELS, ViewConfig

logger = logging.getLogger(__name__)


class RequestStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class RequestSlot:
    name: str
    status: RequestStatus = RequestStatus.IDLE
    data: Any = None
    error: str = ""
    latest_id: int = field(default=0, repr=False)

    @property
    def loading(self) -> bool:
        return self.status is RequestStatus.LOADING

    def start(self) -> int:
        self.latest_id += 1
        self.status = RequestStatus.LOADING
        self.data = None
        self.error = ""
        return self.latest_id

    def is_current(self, request_id: int) -> bool:
        return request_id == self.latest_id

    def succeed(self, request_id: int, data: Any) -> bool:
        if not self.is_current(request_id):
            logger.debug("Discarding stale %s response #%d (latest #%d)", self.name, request_id, self.latest_id)
            return False
        self.status = RequestStatus.SUCCESS
        self.data = data
        return True

    def fail(self, request_id: int, message: str) -> bool:
        if not self.is_current(request_id):
            logger.debug("Discarding stale %s failure #%d (latest #%d)", self.name, request_id, self.latest_id)
            return False
        self.status = RequestStatus.FAILED
        self.error = message
        return True

    def reset(self) -> None:
        # invalidate anything still in flight
        self.latest_id += 1
        self.status = RequestStatus.IDLE
        self.data = None
        self.error = ""


@dataclass
class RunParams:
    customer_name: str = ""
    llm_model: str = DEFAULT_LLM_MODEL
    use_cache: bool = DEFAULT_USE_CACHE

    def is_ready(self) -> bool:
        return bool(self.customer_name.strip())

    def to_body(self, include_cache: bool) -> Dict[str, Any]:
        """Request body for POST /run."""
        if self.llm_model not in LLM_MODELS:
            raise ValueError(f"llm_model must be one of {LLM_MODELS}, got {self.llm_model!r}")
        body: Dict[str, Any] = {
            "customer_name": self.customer_name.strip(),
            "llm_model": self.llm_model,
        }
        if include_cache:
            body["use_cache"] = bool(self.use_cache)
        return body


class AnalysisSession:
    """Everything the viewer keeps between Streamlit reruns."""

    def __init__(self, client: Optional[BackendClient] = None, config: Optional[ViewConfig] = None):
        self.client = client or BackendClient()
        self.config = config or ViewConfig()
        self.params = RunParams()
        # last successful list; a failed refresh leaves it alone
        self.customers: List[str] = []
        self.customers_slot = RequestSlot("customers")
        self.analysis_slot = RequestSlot("analysis")

    @property
    def result(self) -> Optional[NormalizedResult]:
        if self.analysis_slot.status is RequestStatus.SUCCESS:
            return self.analysis_slot.data
        return None

    def fetch_customers(self) -> bool:
        request_id = self.customers_slot.start()
        try:
            customers = self.client.list_customers()
        except BackendError as e:
            logger.warning("GET /customers failed: %s", e)
            self.customers_slot.fail(request_id, str(e))
            return False

        if self.customers_slot.succeed(request_id, customers):
            self.customers = customers
            logger.info("Loaded %d customers", len(customers))
        return True

    def run_analysis(self) -> Optional[NormalizedResult]:
        """Run POST /run for the current params; blank names are ignored silently."""
        if not self.params.is_ready():
            logger.debug("Run skipped: customer name is blank")
            return None

        body = self.params.to_body(include_cache=self.config.cache_toggle)
        request_id = self.analysis_slot.start()
        try:
            payload = self.client.run_analysis(body)
        except BackendError as e:
            logger.warning("POST /run failed for %s: %s", body["customer_name"], e)
            self.analysis_slot.fail(request_id, str(e))
            return None

        result = normalize_result(payload)
        if not self.analysis_slot.succeed(request_id, result):
            return None
        logger.info("Analysis finished for %s", body["customer_name"])
        return result

    def reset(self) -> None:
        self.params = RunParams()
        self.analysis_slot.reset()
        self.customers_slot.reset()
