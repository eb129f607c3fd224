"""
Tests for Pydantic schemas.
Validates camelCase aliasing and request parsing.
"""
from datetime import datetime

from app.schemas.dashboard import DashboardResponse
from app.schemas.document import DocumentConfirmRequest
from app.schemas.photo import PhotoConfirmRequest, PhotoResponse
from app.schemas.upload import UploadSlotResponse
from app.storage.presign import UploadSlot


class TestPhotoSchemas:
    """Tests for photo request/response schemas."""

    def test_confirm_request_accepts_camel_case(self):
        request = PhotoConfirmRequest.model_validate({
            "fileKey": "org-1/team/u-1-a.jpg",
            "fileName": "a.jpg",
            "fileUrl": "https://x/a.jpg",
            "fileSize": 10,
            "mimeType": "image/jpeg",
            "altText": "alt",
        })

        assert request.file_key == "org-1/team/u-1-a.jpg"
        assert request.mime_type == "image/jpeg"
        assert request.alt_text == "alt"
        assert request.tags is None
        assert request.visibility is None

    def test_response_serializes_camel_case(self):
        response = PhotoResponse(
            id="p1",
            organization_id="org-1",
            uploaded_by="u1",
            file_key="k",
            file_url="https://x/k",
            file_name="a.jpg",
            category="team",
            created_at=datetime(2024, 1, 1, 12, 0, 0),
        )

        data = response.model_dump(by_alias=True)

        assert data["fileKey"] == "k"
        assert data["uploadedBy"] == "u1"
        assert data["organizationId"] == "org-1"
        assert data["tags"] == []
        assert "file_key" not in data


class TestDocumentSchemas:

    def test_confirm_request_type_field(self):
        request = DocumentConfirmRequest.model_validate({
            "fileKey": "k", "name": "Contract", "fileUrl": "https://x", "type": "contract",
        })

        assert request.type == "contract"
        assert request.description is None


class TestUploadSlotSchema:

    def test_from_upload_slot(self):
        slot = UploadSlot(upload_url="https://signed", public_url="https://public/k", file_key="k")

        data = UploadSlotResponse.model_validate(slot).model_dump(by_alias=True)

        assert data == {"uploadUrl": "https://signed", "publicUrl": "https://public/k", "fileKey": "k"}


class TestDashboardSchema:

    def test_from_service_dict(self):
        response = DashboardResponse.model_validate({
            "stats": {"photo_count": 2, "photos_this_week": 1, "document_count": 0, "document_types": []},
            "recent_activity": [
                {"type": "photo", "action": "Photo uploaded", "item": "a.jpg", "created_at": datetime(2024, 1, 1)},
            ],
            "organization_name": None,
            "is_admin": False,
        })

        data = response.model_dump(by_alias=True)

        assert data["stats"]["photosThisWeek"] == 1
        assert data["recentActivity"][0]["createdAt"] == datetime(2024, 1, 1)
        assert data["isAdmin"] is False
