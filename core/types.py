"""
타입 정의 모듈

애플리케이션 공통 Enum 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class RunMode(str, Enum):
    """실행 모드 (운영 / 개발)"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class PartnerType(str, Enum):
    """거래처 유형 (보조원장 구분용)"""

    CUSTOMER = "CUSTOMER"
    SUPPLIER = "SUPPLIER"
    EMPLOYEE = "EMPLOYEE"
    OTHER = "OTHER"
