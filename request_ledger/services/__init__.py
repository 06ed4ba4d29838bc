# Services package

from .validation import normalize_method, parse_page_param, require_url
from .http_executor import RequestExecutor, parse_json_body
from .history_ledger import HistoryLedger

__all__ = [
    "normalize_method",
    "parse_page_param",
    "require_url",
    "RequestExecutor",
    "parse_json_body",
    "HistoryLedger",
]
