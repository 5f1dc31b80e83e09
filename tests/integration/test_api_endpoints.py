"""
Integration Tests: Ledger API
-----------------------------
Drives the FastAPI app end-to-end against an in-memory ledger.
Verifies:
- create-policy / submit-claim happy paths and response shapes
- HTTP mapping of every error category
- Authentication and owner-only administration
"""

from underwriting.config import config

DIGEST = "0x" + "ab" * 32
OWNER = config.OWNER_IDENTITY


def create_policy(client, headers, coverage=200_000, category="property"):
    return client.post(
        "/api/v1/policies",
        json={"coverage_amount": coverage, "policy_category": category, "evidence_digest": DIGEST},
        headers=headers,
    )


def submit_claim(client, headers, policy_id=1, amount=10_000, description="Hail damage"):
    return client.post(
        "/api/v1/claims",
        json={"policy_id": policy_id, "claim_amount": amount, "description": description, "evidence_digest": DIGEST},
        headers=headers,
    )


# =========================================================
# ✅ Happy Paths
# =========================================================
def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["status"] == "running"


def test_create_policy_and_read_back(client, auth_headers):
    response = create_policy(client, auth_headers("alice"))
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["policy_id"] == 1
    assert body["risk_score"] == 70
    assert body["premium_amount"] == 40_000

    policy = client.get("/api/v1/policies/1").json()
    assert policy["holder"] == "alice"
    assert policy["claims_count"] == 0

    contract = client.get("/api/v1/contract").json()
    assert contract == {"policy_nonce": 1, "claim_nonce": 0, "contract_balance": 40_000, "paused": False}


def test_submit_claim_returns_decision(client, auth_headers):
    headers = auth_headers("alice")
    create_policy(client, headers)
    response = submit_claim(client, headers)
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["claim_id"] == 1
    assert body["fraud_score"] == 0
    assert body["approved"] is True
    assert body["decision"] == "APPROVE"
    assert body["explanation"].startswith("Fraud score 0")

    claim = client.get("/api/v1/claims/1").json()
    assert claim["processed"] is False
    assert claim["evidence_digest"] == DIGEST
    assert [c["claim_id"] for c in client.get("/api/v1/policies/1/claims").json()] == [1]


def test_oversized_claim_lists_signal(client, auth_headers):
    headers = auth_headers("alice")
    create_policy(client, headers)
    body = submit_claim(client, headers, amount=150_000).json()
    assert body["fraud_score"] == 25
    assert body["decision"] == "APPROVE"
    assert body["signals"][0]["type"] == "oversized_claim"


def test_quote(client, auth_headers):
    response = client.post(
        "/api/v1/policies/quote",
        json={"coverage_amount": 500_000, "policy_category": "auto"},
        headers=auth_headers("alice"),
    )
    assert response.status_code == 200
    assert response.json()["premium_amount"] == 120_000
    assert client.get("/api/v1/contract").json()["policy_nonce"] == 0


def test_profile_lookup(client, auth_headers):
    before = client.get("/api/v1/profiles/alice").json()
    assert before["on_record"] is False
    assert before["profile"]["reputation_score"] == 50

    create_policy(client, auth_headers("alice"))
    after = client.get("/api/v1/profiles/alice").json()
    assert after["on_record"] is True
    assert after["profile"]["total_policies"] == 1


# =========================================================
# ❌ Error Mapping
# =========================================================
def test_missing_token(client):
    response = create_policy(client, {})
    assert response.status_code == 401


def test_invalid_token(client):
    response = create_policy(client, {"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_invalid_amount(client, auth_headers):
    response = create_policy(client, auth_headers("alice"), coverage=0)
    assert response.status_code == 400
    assert response.json()["code"] == "invalid-amount"


def test_invalid_risk_score(client, auth_headers):
    response = create_policy(client, auth_headers("alice"), coverage=600_000)
    assert response.status_code == 422
    assert response.json()["code"] == "invalid-risk-score"


def test_transfer_failure(client, auth_headers):
    response = create_policy(client, auth_headers("pauper"))
    assert response.status_code == 402
    assert response.json()["code"] == "transfer-failure"
    assert client.get("/api/v1/contract").json()["policy_nonce"] == 0


def test_not_found(client, auth_headers):
    assert client.get("/api/v1/policies/9").status_code == 404
    assert client.get("/api/v1/claims/9").json()["code"] == "not-found"
    assert submit_claim(client, auth_headers("alice"), policy_id=9).status_code == 404


def test_unauthorized_claim(client, auth_headers):
    create_policy(client, auth_headers("alice"))
    response = submit_claim(client, auth_headers("bob"))
    assert response.status_code == 403
    assert response.json()["code"] == "unauthorized"


def test_policy_expired(client, auth_headers, clock):
    headers = auth_headers("alice")
    end_block = create_policy(client, headers).json()["end_block"]
    clock.set(end_block + 1)
    response = submit_claim(client, headers)
    assert response.status_code == 409
    assert response.json()["code"] == "policy-expired"


def test_malformed_payload(client, auth_headers):
    response = client.post(
        "/api/v1/claims",
        json={"policy_id": 1, "claim_amount": 10, "evidence_digest": "zz"},
        headers=auth_headers("alice"),
    )
    assert response.status_code == 422
    assert "detail" in response.json()


# =========================================================
# 🛑 Administration
# =========================================================
def test_pause_blocks_workflows(client, auth_headers):
    assert client.post("/api/v1/admin/pause", json={"paused": True}, headers=auth_headers("alice")).status_code == 403

    response = client.post("/api/v1/admin/pause", json={"paused": True}, headers=auth_headers(OWNER))
    assert response.json() == {"paused": True}

    blocked = create_policy(client, auth_headers("alice"))
    assert blocked.status_code == 503
    assert blocked.json()["code"] == "paused"


def test_fund_account(client, auth_headers, transfers):
    response = client.post(
        "/api/v1/admin/fund",
        json={"identity": "newcomer", "amount": 50_000},
        headers=auth_headers(OWNER),
    )
    assert response.status_code == 200
    assert response.json() == {"identity": "newcomer", "balance": 50_000}
    assert create_policy(client, auth_headers("newcomer")).status_code == 201
    assert transfers.balance_of("newcomer") == 10_000


def test_fund_requires_owner(client, auth_headers):
    response = client.post(
        "/api/v1/admin/fund",
        json={"identity": "alice", "amount": 1},
        headers=auth_headers("alice"),
    )
    assert response.status_code == 403
