"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
분개/계정 본문은 Ledger 모델의 to_dict()를 그대로 사용한다.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    mode: str = Field(..., description="실행 모드 (development/production)")
    database: str = Field(..., description="DB 상태 (ok/unavailable)")
    version: str = Field(..., description="API 버전")


class ErrorResponse(BaseModel):
    """오류 응답"""

    error: str = Field(..., description="사람이 읽을 수 있는 오류 메시지")


# 라우터 공통 오류 응답 문서
ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse, "description": "검증 실패 / 차대 불일치"},
    404: {"model": ErrorResponse, "description": "대상 없음"},
    409: {"model": ErrorResponse, "description": "상태 충돌"},
    500: {"model": ErrorResponse, "description": "저장소 오류"},
}
