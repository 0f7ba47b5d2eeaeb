"""API tests for documents and the rendering callback."""

import asyncio
import threading
from datetime import date
from unittest.mock import Mock, patch

import httpx
import pytest

from backoffice.core.config import settings
from backoffice.core.exceptions import WebhookDispatchError
from backoffice.main import app
from backoffice.models.document import Document


def _new_document(customer, contractor, **overrides):
    body = {
        "type": "SHIPMENT",
        "customerId": customer.id,
        "contractorId": contractor.id,
        "amount": 25000,
        "date": "2024-01-01",
    }
    body.update(overrides)
    return body


@pytest.fixture
def stored_document(db, customer, contractor, regular_user):
    """A document owned by regular_user, waiting for its render callback."""
    document = Document(
        type="RENTAL",
        customer_id=customer.id,
        contractor_id=contractor.id,
        amount=1000.0,
        date=date(2024, 1, 1),
        status="PROCESSING",
        created_by=regular_user.id,
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    return document


class TestCreateDocumentApi:
    """Test POST /api/documents."""

    def test_create_dispatches(self, client, user_headers, customer, contractor, render_client):
        response = client.post(
            "/api/documents", json=_new_document(customer, contractor), headers=user_headers
        )

        assert response.status_code == 201
        body = response.json()["document"]
        assert body["status"] == "PROCESSING"
        assert body["amount"] == 25000
        assert body["date"] == "2024-01-01"
        assert body["customer"]["inn"] == customer.inn
        assert body["contractor"]["inn"] == contractor.inn
        assert body["creator"]["name"] == "Regular User"

        payload = render_client.dispatch.call_args[0][0]
        assert payload["type_doc"] == "Отгрузка"
        assert payload["colontitul_zakazchik"] == "И.И. Иванов"
        assert payload["colontitul_ispolnitel"] == "П. Петров"

    def test_dispatch_failure_still_created(self, client, user_headers, customer, contractor, render_client):
        """Test a webhook failure is reported through the status, not the HTTP code."""
        render_client.dispatch.side_effect = WebhookDispatchError("down", status_code=503)

        response = client.post(
            "/api/documents", json=_new_document(customer, contractor), headers=user_headers
        )

        assert response.status_code == 201
        assert response.json()["document"]["status"] == "FAILED"

    def test_amount_as_string(self, client, user_headers, customer, contractor):
        response = client.post(
            "/api/documents",
            json=_new_document(customer, contractor, amount="1234.56"),
            headers=user_headers,
        )
        assert response.status_code == 201
        assert response.json()["document"]["amount"] == 1234.56

    @pytest.mark.parametrize("amount", ["nan", "inf", "1e400"])
    def test_non_finite_amount(self, client, user_headers, customer, contractor, render_client, amount):
        response = client.post(
            "/api/documents",
            json=_new_document(customer, contractor, amount=amount),
            headers=user_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Amount must be a number"}
        render_client.dispatch.assert_not_called()

    def test_slow_dispatch_does_not_block_other_requests(
        self, client, user_headers, customer, contractor, render_client
    ):
        """Test the server keeps answering while a document's webhook call is in flight."""
        started = threading.Event()
        release = threading.Event()
        finished = []

        def slow_dispatch(payload):
            started.set()
            release.wait(timeout=5)
            finished.append("dispatch")
            return Mock(status_code=200, ok=True)

        render_client.dispatch.side_effect = slow_dispatch

        async def scenario():
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
                create = asyncio.create_task(
                    http.post("/api/documents", json=_new_document(customer, contractor), headers=user_headers)
                )
                while not started.is_set() and not create.done():
                    await asyncio.sleep(0.01)
                health = await http.get("/api/health")
                finished.append("health")
                release.set()
                return health, await create

        health, created = asyncio.run(scenario())

        assert health.status_code == 200
        assert created.status_code == 201
        assert finished == ["health", "dispatch"]

    def test_missing_field(self, client, user_headers, customer, contractor, render_client):
        body = _new_document(customer, contractor)
        del body["date"]

        response = client.post("/api/documents", json=body, headers=user_headers)

        assert response.status_code == 400
        render_client.dispatch.assert_not_called()

    def test_unknown_customer(self, client, user_headers, customer, contractor):
        response = client.post(
            "/api/documents",
            json=_new_document(customer, contractor, customerId=999),
            headers=user_headers,
        )
        assert response.status_code == 404

    def test_requires_token(self, client, customer, contractor):
        response = client.post("/api/documents", json=_new_document(customer, contractor))
        assert response.status_code == 401


class TestReadDocumentsApi:
    """Test GET /api/documents, /{id} and /meta/types."""

    def test_list(self, client, user_headers, stored_document):
        response = client.get("/api/documents", headers=user_headers)

        assert response.status_code == 200
        documents = response.json()["documents"]
        assert [d["id"] for d in documents] == [stored_document.id]

    def test_get(self, client, other_headers, stored_document):
        """Test any authenticated user can read any document."""
        response = client.get(f"/api/documents/{stored_document.id}", headers=other_headers)

        assert response.status_code == 200
        assert response.json()["document"]["status"] == "PROCESSING"

    def test_get_unknown(self, client, user_headers):
        response = client.get("/api/documents/999", headers=user_headers)
        assert response.status_code == 404

    def test_types(self, client, user_headers):
        response = client.get("/api/documents/meta/types", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["types"] == [
            {"value": "SHIPMENT", "label": "Отгрузка"},
            {"value": "RENTAL", "label": "Аренда"},
        ]


class TestRenderCallbackApi:
    """Test POST /api/documents/webhook/{id}."""

    def test_success_then_download(self, client, user_headers, stored_document):
        response = client.post(
            f"/api/documents/webhook/{stored_document.id}",
            json={"status": "success", "documentUrl": "https://files.example.com/doc.pdf"},
        )
        assert response.status_code == 200

        response = client.get(
            f"/api/documents/{stored_document.id}/download",
            headers=user_headers,
            follow_redirects=False,
        )
        assert response.status_code == 302
        assert response.headers["location"] == "https://files.example.com/doc.pdf"

    def test_failure_callback(self, client, user_headers, stored_document):
        response = client.post(
            f"/api/documents/webhook/{stored_document.id}",
            json={"status": "error", "error": "template not found"},
        )
        assert response.status_code == 200

        document = client.get(f"/api/documents/{stored_document.id}", headers=user_headers).json()["document"]
        assert document["status"] == "FAILED"
        assert document["workflowResponse"]["error"] == "template not found"

    def test_terminal_document_rejects_change(self, client, stored_document):
        client.post(f"/api/documents/webhook/{stored_document.id}", json={"status": "error"})

        response = client.post(
            f"/api/documents/webhook/{stored_document.id}",
            json={"status": "success", "documentUrl": "https://files.example.com/late.pdf"},
        )

        assert response.status_code == 400

    def test_unknown_document(self, client):
        response = client.post("/api/documents/webhook/999", json={"status": "success"})
        assert response.status_code == 404

    def test_shared_secret(self, client, stored_document):
        """Test the callback secret is enforced once configured."""
        with patch.object(settings, "WEBHOOK_CALLBACK_SECRET", "hush"):
            denied = client.post(
                f"/api/documents/webhook/{stored_document.id}", json={"status": "success"}
            )
            accepted = client.post(
                f"/api/documents/webhook/{stored_document.id}",
                json={"status": "success"},
                headers={"X-Webhook-Secret": "hush"},
            )

        assert denied.status_code == 401
        assert accepted.status_code == 200

    def test_non_ascii_secret(self, client, stored_document):
        """Test non-ASCII secrets are compared byte for byte instead of erroring."""
        url = f"/api/documents/webhook/{stored_document.id}"
        with patch.object(settings, "WEBHOOK_CALLBACK_SECRET", "тайна"):
            wrong = client.post(
                url, json={"status": "success"}, headers={"X-Webhook-Secret": "секрет".encode("utf-8")}
            )
            accepted = client.post(
                url, json={"status": "success"}, headers={"X-Webhook-Secret": "тайна".encode("utf-8")}
            )

        assert wrong.status_code == 401
        assert accepted.status_code == 200

    def test_non_ascii_header_against_ascii_secret(self, client, stored_document):
        with patch.object(settings, "WEBHOOK_CALLBACK_SECRET", "hush"):
            response = client.post(
                f"/api/documents/webhook/{stored_document.id}",
                json={"status": "success"},
                headers={"X-Webhook-Secret": "тайна".encode("utf-8")},
            )

        assert response.status_code == 401


class TestDownloadApi:
    """Test GET /api/documents/{id}/download."""

    def test_not_completed(self, client, user_headers, stored_document):
        response = client.get(
            f"/api/documents/{stored_document.id}/download",
            headers=user_headers,
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Document is not ready for download"}

    def test_unknown(self, client, user_headers):
        response = client.get("/api/documents/999/download", headers=user_headers)
        assert response.status_code == 404


class TestDeleteDocumentApi:
    """Test DELETE /api/documents/{id}."""

    def test_other_user_forbidden(self, client, other_headers, stored_document):
        response = client.delete(f"/api/documents/{stored_document.id}", headers=other_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Access denied"}

    def test_creator_deletes(self, client, user_headers, stored_document):
        response = client.delete(f"/api/documents/{stored_document.id}", headers=user_headers)
        assert response.status_code == 200

        response = client.get(f"/api/documents/{stored_document.id}", headers=user_headers)
        assert response.status_code == 404


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
