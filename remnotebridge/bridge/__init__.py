"""Create-rem bridge: wire models, correlator and batch driver."""

from .batch import ResultSequence, RemItem, run_batch
from .correlator import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT_MS,
    Exchange,
    ExchangeState,
    send_create_request,
)
from .protocol import CREATE_REM_ACTION, CreateRemRequest, RemReply
from .serialization import decode_reply_frame, encode_request_frame, normalize_parent_id, safe_dict

__all__ = [
    "CREATE_REM_ACTION",
    "CreateRemRequest",
    "RemReply",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_TIMEOUT_MS",
    "Exchange",
    "ExchangeState",
    "send_create_request",
    "RemItem",
    "ResultSequence",
    "run_batch",
    "decode_reply_frame",
    "encode_request_frame",
    "normalize_parent_id",
    "safe_dict",
]
