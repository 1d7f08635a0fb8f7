"""
Certificate Tests

Tests for certificate rendering, download and public verification.
"""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from app.models import ModuleType, UserRole


class TestRenderCertificate:
    """Tests for the PDF renderer."""

    def test_renders_pdf_bytes(self):
        from app.services.certificate_service import render_certificate_pdf

        certificate = SimpleNamespace(
            course_title="Python Basics",
            issued_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
            verification_id=str(uuid.uuid4()),
        )

        pdf = render_certificate_pdf(certificate, "Ada Lovelace")

        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 500

    def test_certificate_url_format(self):
        from app.services.certificate_service import certificate_url

        user_id = uuid.uuid4()

        assert certificate_url(7, user_id) == f"/certificates/cert-7-{user_id}.pdf"


async def _finish_course(client, make_user, make_course, auth_headers):
    instructor = await make_user(UserRole.INSTRUCTOR)
    student = await make_user(UserRole.STUDENT, name="Ada Lovelace")
    course = await make_course(
        instructor,
        title="Data Structures",
        modules=[{"title": "Only", "type": ModuleType.PDF, "content_url": "https://cdn.mail.com/ds.pdf"}],
    )
    headers = auth_headers(student)
    eid = (await client.post(f"/api/courses/{course.id}/enroll", headers=headers)).json()["id"]
    await client.post(
        f"/api/student/enrollments/{eid}/modules/{course.modules[0].id}/complete",
        headers=headers,
    )
    certificates = (await client.get("/api/student/certificates", headers=headers)).json()
    return student, headers, certificates[0]


@pytest.mark.asyncio
class TestCertificateApi:
    """Tests for the certificate endpoints."""

    async def test_download_pdf(self, client, make_user, make_course, auth_headers):
        _, headers, certificate = await _finish_course(client, make_user, make_course, auth_headers)

        response = await client.get(
            f"/api/student/certificates/{certificate['id']}/download",
            headers=headers,
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    async def test_download_someone_elses(self, client, make_user, make_course, auth_headers):
        _, _, certificate = await _finish_course(client, make_user, make_course, auth_headers)
        stranger = await make_user(UserRole.STUDENT)

        response = await client.get(
            f"/api/student/certificates/{certificate['id']}/download",
            headers=auth_headers(stranger),
        )

        assert response.status_code == 403

    async def test_public_verification(self, client, make_user, make_course, auth_headers):
        _, _, certificate = await _finish_course(client, make_user, make_course, auth_headers)

        response = await client.get(f"/api/certificates/{certificate['id']}/verify")

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["student_name"] == "Ada Lovelace"
        assert data["course_title"] == "Data Structures"
        assert data["certificate_id"] == certificate["verification_id"]

    async def test_unknown_certificate(self, client):
        response = await client.get(f"/api/certificates/{uuid.uuid4()}/verify")

        assert response.status_code == 404
