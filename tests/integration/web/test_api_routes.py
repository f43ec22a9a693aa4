"""Web API 통합 테스트

TestClient로 lifespan(스키마 초기화)까지 실행하고
임시 settings.yaml의 DB를 사용한다.
"""

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from core.config.loader import get_settings
from web.app import app


@pytest.fixture
def client(temp_settings_file: Path) -> Iterator[TestClient]:
    """임시 DB를 사용하는 TestClient"""
    get_settings(temp_settings_file)
    with TestClient(app) as test_client:
        yield test_client


def _sale_payload(amount: str = "500", post: bool = False, **extra) -> dict:
    return {
        "entry_date": "2026-03-01",
        "reference": "INV-0001",
        "description": "Cash sale",
        "lines": [
            {"account_id": "1010", "debit_amount": amount},
            {"account_id": "4000", "credit_amount": amount},
        ],
        "post": post,
        **extra,
    }


class TestHealth:
    """GET /health"""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["mode"] == "development"
        assert data["database"] == "ok"


class TestAccountsApi:
    """/api/accounts"""

    def test_list_initial_accounts(self, client: TestClient) -> None:
        response = client.get("/api/accounts")

        assert response.status_code == 200
        assert [a["code"] for a in response.json()] == [
            "1010",
            "1100",
            "1200",
            "1330",
            "2100",
            "3000",
            "4000",
        ]

    def test_filter_by_type(self, client: TestClient) -> None:
        response = client.get("/api/accounts", params={"type": "EQUITY"})

        assert [a["code"] for a in response.json()] == ["3000"]

    def test_create_and_duplicate(self, client: TestClient) -> None:
        payload = {"code": "2500", "name": "Bank Loan", "account_type": "LIABILITY"}

        created = client.post("/api/accounts", json=payload)
        duplicate = client.post("/api/accounts", json=payload)

        assert created.status_code == 201
        assert created.json()["normal_balance"] == "CREDIT"
        assert duplicate.status_code == 409
        assert "2500" in duplicate.json()["error"]

    def test_get_unknown(self, client: TestClient) -> None:
        response = client.get("/api/accounts/9999")

        assert response.status_code == 404
        assert response.json() == {"error": "Account not found: 9999"}

    def test_deactivate(self, client: TestClient) -> None:
        response = client.delete("/api/accounts/1330")

        assert response.status_code == 200
        assert response.json()["is_active"] is False
        listed = client.get("/api/accounts", params={"includeInactive": "true"}).json()
        assert "1330" in [a["code"] for a in listed]


class TestJournalEntriesApi:
    """/api/journal-entries"""

    def test_create_posted(self, client: TestClient) -> None:
        """생성 + 전기 → 잔액 반영"""
        response = client.post("/api/journal-entries", json=_sale_payload(post=True))

        assert response.status_code == 201
        data = response.json()
        assert data["journal_number"] == "000001"
        assert data["status"] == "POSTED"
        assert data["reference_number"] == "INV-0001"
        assert data["lines"][0]["debit_amount"] == "500.00"
        assert data["lines"][0]["credit_amount"] is None

        cash = client.get("/api/accounts/1010").json()
        sales = client.get("/api/accounts/4000").json()
        assert cash["current_balance"] == "500.00"
        assert sales["current_balance"] == "500.00"

    def test_unbalanced_is_400(self, client: TestClient) -> None:
        payload = _sale_payload()
        payload["lines"][1]["credit_amount"] = "400"

        response = client.post("/api/journal-entries", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == (
            "Journal entry is not balanced. Debits: 500.00, Credits: 400.00"
        )
        assert client.get("/api/accounts/1010").json()["current_balance"] == "0.00"

    def test_single_line_is_400(self, client: TestClient) -> None:
        payload = _sale_payload()
        payload["lines"] = payload["lines"][:1]

        response = client.post("/api/journal-entries", json=payload)

        assert response.status_code == 400
        assert "at least 2 lines" in response.json()["error"]

    def test_unknown_account_is_404(self, client: TestClient) -> None:
        payload = _sale_payload()
        payload["lines"][1]["account_id"] = "9999"

        response = client.post("/api/journal-entries", json=payload)

        assert response.status_code == 404

    def test_schema_error_is_400(self, client: TestClient) -> None:
        """요청 스키마 오류도 {"error": ...}"""
        response = client.post("/api/journal-entries", json={"lines": "not-a-list"})

        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.parametrize("source_type", ["REVERSAL", "AUTO_BALANCE"])
    def test_system_source_type_is_400(self, client: TestClient, source_type: str) -> None:
        """역분개/자동보정 유형은 API로 생성 불가"""
        payload = _sale_payload()
        payload["source_document_type"] = source_type
        payload["source_document_id"] = "some-entry"

        response = client.post("/api/journal-entries", json=payload)

        assert response.status_code == 400
        assert "reserved for system entries" in response.json()["error"]

    def test_huge_amount_is_400(self, client: TestClient) -> None:
        payload = _sale_payload()
        payload["lines"][0]["debit_amount"] = "1e30"
        payload["lines"][1]["credit_amount"] = "1e30"

        response = client.post("/api/journal-entries", json=payload)

        assert response.status_code == 400
        assert "Invalid amount" in response.json()["error"]

    def test_draft_lifecycle(self, client: TestClient) -> None:
        """DRAFT 수정 → 전기 → 수정/삭제 거부 → 역분개"""
        entry_id = client.post("/api/journal-entries", json=_sale_payload()).json()["id"]

        updated = client.put(f"/api/journal-entries/{entry_id}", json={"description": "Edited"})
        posted = client.post(f"/api/journal-entries/{entry_id}/post")
        rejected_update = client.put(f"/api/journal-entries/{entry_id}", json={"description": "x"})
        rejected_delete = client.delete(f"/api/journal-entries/{entry_id}")
        reversal = client.post(f"/api/journal-entries/{entry_id}/reverse")

        assert updated.json()["description"] == "Edited"
        assert posted.json()["status"] == "POSTED"
        assert rejected_update.status_code == 409
        assert rejected_delete.status_code == 409
        assert client.get(f"/api/journal-entries/{entry_id}").json()["description"] == "Edited"
        assert reversal.status_code == 201
        assert reversal.json()["source_document_type"] == "REVERSAL"
        assert client.get("/api/accounts/1010").json()["current_balance"] == "0.00"

    def test_delete_draft(self, client: TestClient) -> None:
        entry_id = client.post("/api/journal-entries", json=_sale_payload()).json()["id"]

        response = client.delete(f"/api/journal-entries/{entry_id}")

        assert response.json() == {"deleted": True, "id": entry_id}
        assert client.get(f"/api/journal-entries/{entry_id}").status_code == 404

    def test_list_pagination(self, client: TestClient) -> None:
        for day in ("01", "02", "03"):
            payload = _sale_payload()
            payload["entry_date"] = f"2026-03-{day}"
            client.post("/api/journal-entries", json=payload)

        response = client.get("/api/journal-entries", params={"page": 1, "limit": 2})

        data = response.json()
        assert [e["entry_date"] for e in data["entries"]] == ["2026-03-03", "2026-03-02"]
        assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}

    def test_list_filters(self, client: TestClient) -> None:
        client.post("/api/journal-entries", json=_sale_payload(post=True))
        client.post("/api/journal-entries", json=_sale_payload(reference="PO-9"))

        posted = client.get("/api/journal-entries", params={"status": "POSTED"}).json()
        by_ref = client.get("/api/journal-entries", params={"reference": "po-"}).json()
        by_date = client.get(
            "/api/journal-entries", params={"startDate": "2026-04-01"}
        ).json()

        assert posted["pagination"]["total"] == 1
        assert by_ref["pagination"]["total"] == 1
        assert by_date["pagination"]["total"] == 0


class TestOpeningBalancesApi:
    """/api/opening-balances"""

    def test_create_conflict_update_delete(self, client: TestClient) -> None:
        payload = {"account_id": "1010", "opening_date": "2026-01-01", "debit_amount": "1500"}

        created = client.post("/api/opening-balances", json=payload)
        duplicate = client.post("/api/opening-balances", json=payload)
        opening_id = created.json()["id"]
        updated = client.put(f"/api/opening-balances/{opening_id}", json={"debit_amount": "1200"})

        assert created.status_code == 201
        assert duplicate.status_code == 409
        assert "Use update instead" in duplicate.json()["error"]
        assert updated.json()["debit_amount"] == "1200.00"
        assert client.get("/api/accounts/1010").json()["opening_balance"] == "1200.00"

        deleted = client.delete(f"/api/opening-balances/{opening_id}")

        assert deleted.json() == {"deleted": True, "id": opening_id}
        assert client.get(f"/api/opening-balances/{opening_id}").status_code == 404
        assert client.get("/api/accounts/1010").json()["current_balance"] == "0.00"

    def test_partner_filter(self, client: TestClient) -> None:
        client.post(
            "/api/opening-balances",
            json={
                "account_id": "1200",
                "opening_date": "2026-01-01",
                "balance_amount": "300",
                "partner": {"partner_type": "CUSTOMER", "partner_id": "C-001"},
            },
        )
        client.post(
            "/api/opening-balances",
            json={"account_id": "1010", "opening_date": "2026-01-01", "balance_amount": "50"},
        )

        customers = client.get("/api/opening-balances", params={"partnerType": "CUSTOMER"}).json()
        everything = client.get("/api/opening-balances").json()

        assert [b["partner_id"] for b in customers] == ["C-001"]
        assert len(everything) == 2

    def test_snapshot(self, client: TestClient) -> None:
        response = client.post(
            "/api/opening-balances/snapshot",
            json={
                "opening_date": "2026-01-01",
                "items": [
                    {"account_id": "1010", "amount": "1000"},
                    {"account_id": "2100", "amount": "300"},
                ],
            },
        )

        assert response.status_code == 201
        assert response.json()["balancing"]["credit_amount"] == "700.00"
        assert client.get("/api/accounts/3000").json()["current_balance"] == "700.00"


class TestAccountingApi:
    """/api/accounting"""

    def test_auto_balance_scenario(self, client: TestClient) -> None:
        """자산 100,000 / 부채 20,000 / 자본 70,000 → 보정 후 자본 80,000"""
        for code, amount in (("1010", "100000"), ("2100", "20000"), ("3000", "70000")):
            client.post(
                "/api/opening-balances",
                json={"account_id": code, "opening_date": "2026-01-01", "balance_amount": amount},
            )

        before = client.get("/api/accounting/position").json()
        result = client.post("/api/accounting/auto-balance").json()
        after = client.get("/api/accounting/position").json()

        assert before["variance"] == "10000.00"
        assert result["already_balanced"] is False
        assert result["new_equity_balance"] == "80000.00"
        assert result["balancing_type"] == "Increased Owner Equity"
        assert after["variance"] == "0.00"
        entries = client.get("/api/journal-entries").json()
        assert entries["pagination"]["total"] == 1

    def test_auto_balance_when_balanced(self, client: TestClient) -> None:
        result = client.post("/api/accounting/auto-balance").json()

        assert result["already_balanced"] is True
        assert result["variance"] == "0.00"

    def test_record_event(self, client: TestClient) -> None:
        response = client.post(
            "/api/accounting/events",
            json={
                "kind": "INVOICE",
                "document_id": "INV-1",
                "amount": "12500",
                "event_date": "2026-03-01",
                "counterparty": "Acme Ltd",
            },
        )

        assert response.status_code == 201
        assert response.json()["status"] == "POSTED"
        assert client.get("/api/accounts/1200").json()["current_balance"] == "12500.00"

    def test_verify(self, client: TestClient) -> None:
        client.post("/api/journal-entries", json=_sale_payload(post=True))

        response = client.get("/api/accounting/verify")

        assert response.json() == {"consistent": True, "mismatches": []}
