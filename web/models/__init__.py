"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    BusinessEventRequest,
    JournalEntryCreateRequest,
    JournalEntryUpdateRequest,
    JournalLineRequest,
    OpeningBalanceCreateRequest,
    OpeningBalanceUpdateRequest,
    OpeningItemRequest,
    OpeningSnapshotRequest,
    PartnerRequest,
    ReverseEntryRequest,
)
from web.models.responses import (
    ERROR_RESPONSES,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    # Requests
    "AccountCreateRequest",
    "BusinessEventRequest",
    "JournalEntryCreateRequest",
    "JournalEntryUpdateRequest",
    "JournalLineRequest",
    "OpeningBalanceCreateRequest",
    "OpeningBalanceUpdateRequest",
    "OpeningItemRequest",
    "OpeningSnapshotRequest",
    "PartnerRequest",
    "ReverseEntryRequest",
    # Responses
    "ERROR_RESPONSES",
    "ErrorResponse",
    "HealthResponse",
]
