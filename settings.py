"""
settings.py
Runtime configuration for the analysis viewer: backend location, view presets
and logging.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional, Union


# ===========================================================
# CONFIGURATION
# ===========================================================
DEFAULT_BACKEND_URL = "http://localhost:8000"

LLM_MODELS = ["ollama", "gpt5"]
DEFAULT_LLM_MODEL = "ollama"
DEFAULT_USE_CACHE = True

CUSTOMER_INPUT_MODES = ("select", "freetext")
RAW_SCORE = "raw"


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


BACKEND_URL = os.getenv("STR_BACKEND_URL", DEFAULT_BACKEND_URL).rstrip("/")
# None means requests wait until the backend answers
REQUEST_TIMEOUT = _optional_float(os.getenv("STR_REQUEST_TIMEOUT"))
LOG_LEVEL = os.getenv("STR_LOG_LEVEL", "INFO")


# ===========================================================
# View presets
# ===========================================================
@dataclass(frozen=True)
class ViewConfig:
    """
    Differences between the deployed viewer variants.

    customer_input: "select" shows a dropdown fed by GET /customers,
                    "freetext" a plain text box.
    cache_toggle:   expose use_cache and send it with POST /run.
    score_precision: decimals for the risk score, or "raw" for the
                     backend's value as-is.
    """

    customer_input: str = "select"
    cache_toggle: bool = True
    score_precision: Union[int, str] = 3

    def __post_init__(self):
        if self.customer_input not in CUSTOMER_INPUT_MODES:
            raise ValueError(
                f"customer_input must be one of {CUSTOMER_INPUT_MODES}, got {self.customer_input!r}"
            )
        if not isinstance(self.cache_toggle, bool):
            raise ValueError(f"cache_toggle must be a bool, got {self.cache_toggle!r}")
        precision = self.score_precision
        if precision != RAW_SCORE and (
            isinstance(precision, bool) or not isinstance(precision, int) or precision < 0
        ):
            raise ValueError(
                f"score_precision must be a non-negative int or {RAW_SCORE!r}, got {precision!r}"
            )


VIEW_PRESETS: Dict[str, ViewConfig] = {
    "select": ViewConfig(customer_input="select", cache_toggle=True, score_precision=3),
    "freetext": ViewConfig(customer_input="freetext", cache_toggle=False, score_precision=RAW_SCORE),
}


def load_view_config(preset: Optional[str] = None) -> ViewConfig:
    """Resolve a preset name (default: STR_VIEW_PRESET, then "select")."""
    name = preset or os.getenv("STR_VIEW_PRESET", "select")
    try:
        return VIEW_PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown view preset {name!r}; expected one of {sorted(VIEW_PRESETS)}")


# ===========================================================
# Logging
# ===========================================================
def setup_logging(level: str = LOG_LEVEL) -> logging.Logger:
    """Configure the root handler once; Streamlit reruns must not stack handlers."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return root
