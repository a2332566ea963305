"""
Async HTTP client for the RishStay API.
One coroutine per route; authenticated calls take an explicit Session.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple
import uuid
import logging

import httpx

from app.client.session import Session
from app.schemas.user import UserResponse
from app.schemas.property import PropertyResponse
from app.schemas.message import MessageResponse
from app.schemas.review import ReviewResponse
from app.schemas.common import PaginationMeta

logger = logging.getLogger(__name__)

# (filename, content, content_type)
ImageUpload = Tuple[str, bytes, str]


class ApiError(Exception):
    """Non-2xx response or a body with success false."""

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(f"{status_code} {code or 'ERROR'}: {message}")
        self.status_code = status_code
        self.message = message
        self.code = code
        self.details = details or []


class RishStayClient:
    """
    Client for the RishStay REST API.

    Pass base_url for a running server, or transport (for example
    httpx.ASGITransport) to call an application in-process. Requests are
    never retried.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        api_prefix: str = "/api",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0
    ):
        self.api_prefix = api_prefix.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            timeout=timeout,
            headers={"Accept": "application/json"}
        )

    async def __aenter__(self) -> "RishStayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        session: Optional[Session] = None,
        **kwargs: Any
    ) -> Dict[str, Any]:
        """
        Send a request and unwrap the response envelope.

        Raises:
            ApiError: If the status is not 2xx or the body reports failure
        """
        headers = session.headers() if session else {}
        response = await self._client.request(method, f"{self.api_prefix}{path}", headers=headers, **kwargs)

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error or body.get("success") is False:
            error = body.get("error") or {}
            logger.debug(f"{method} {path} failed with {response.status_code}: {error}")
            raise ApiError(
                status_code=response.status_code,
                message=error.get("message") or response.reason_phrase,
                code=error.get("code"),
                details=error.get("details")
            )
        return body

    # Auth

    async def create_user(
        self,
        name: str,
        email: str,
        phone_no: str,
        password: str,
        role: str
    ) -> Session:
        """Sign up and return a session for the new account."""
        body = await self._request("POST", "/auth/createUser", json={
            "name": name,
            "email": email,
            "phoneNo": phone_no,
            "password": password,
            "role": role,
        })
        return _session(body["data"])

    async def login(self, email: str, password: str) -> Session:
        """Log in and return a session."""
        body = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        return _session(body["data"])

    async def get_user(self, session: Session) -> UserResponse:
        body = await self._request("GET", "/auth/getuser", session)
        return UserResponse.model_validate(body["data"])

    async def update_user(self, session: Session, **changes: Any) -> UserResponse:
        """Change name, email or phone_no; keyword names are snake_case."""
        body = await self._request("PUT", "/auth/updateuser", session, json=_camel(changes))
        return UserResponse.model_validate(body["data"])

    async def change_password(self, session: Session, old_password: str, new_password: str) -> None:
        await self._request("PUT", "/auth/change-password", session, json={
            "oldPassword": old_password,
            "newPassword": new_password,
        })

    async def delete_account(self, session: Session) -> None:
        await self._request("DELETE", "/auth/delete-account", session)

    # Properties

    async def create_property(self, session: Session, data: Dict[str, Any]) -> PropertyResponse:
        """Create a listing; data uses the API's camelCase keys."""
        body = await self._request("POST", "/property/create", session, json=data)
        return PropertyResponse.model_validate(body["data"])

    async def list_properties(self, **filters: Any) -> Tuple[List[PropertyResponse], PaginationMeta]:
        """Search listings; filter names are snake_case and None values are left out."""
        params = {key: _query_value(value) for key, value in _camel(filters).items() if value is not None}
        body = await self._request("GET", "/property/all", params=params)
        return _properties(body["data"]), PaginationMeta.model_validate(body["pagination"])

    async def my_properties(self, session: Session) -> List[PropertyResponse]:
        body = await self._request("GET", "/property/myproperties", session)
        return _properties(body["data"])

    async def get_property(self, property_id: uuid.UUID) -> PropertyResponse:
        body = await self._request("GET", f"/property/{property_id}")
        return PropertyResponse.model_validate(body["data"])

    async def similar_properties(self, property_id: uuid.UUID, limit: int = 3) -> List[PropertyResponse]:
        body = await self._request("GET", f"/property/{property_id}/similar", params={"limit": limit})
        return _properties(body["data"])

    async def update_property(self, session: Session, property_id: uuid.UUID, changes: Dict[str, Any]) -> PropertyResponse:
        body = await self._request("PUT", f"/property/update/{property_id}", session, json=changes)
        return PropertyResponse.model_validate(body["data"])

    async def replace_images(
        self,
        session: Session,
        property_id: uuid.UUID,
        images: Sequence[ImageUpload]
    ) -> PropertyResponse:
        body = await self._request("PUT", f"/property/{property_id}/images", session, files=_files(images))
        return PropertyResponse.model_validate(body["data"])

    async def add_images(
        self,
        session: Session,
        property_id: uuid.UUID,
        images: Sequence[ImageUpload]
    ) -> PropertyResponse:
        body = await self._request("POST", f"/property/{property_id}/images", session, files=_files(images))
        return PropertyResponse.model_validate(body["data"])

    async def delete_image(self, session: Session, property_id: uuid.UUID, public_id: str) -> PropertyResponse:
        body = await self._request("DELETE", f"/property/{property_id}/images/{public_id}", session)
        return PropertyResponse.model_validate(body["data"])

    async def set_room_status(
        self,
        session: Session,
        property_id: uuid.UUID,
        room_index: int,
        status: str
    ) -> PropertyResponse:
        body = await self._request(
            "PUT", f"/property/{property_id}/rooms/{room_index}/status", session, json={"status": status}
        )
        return PropertyResponse.model_validate(body["data"])

    async def delete_property(self, session: Session, property_id: uuid.UUID) -> None:
        await self._request("DELETE", f"/property/delete/{property_id}", session)

    async def toggle_availability(self, session: Session, property_id: uuid.UUID) -> PropertyResponse:
        body = await self._request("PUT", f"/property/toggle-availability/{property_id}", session)
        return PropertyResponse.model_validate(body["data"])

    # Messages

    async def send_message(
        self,
        session: Session,
        property_id: uuid.UUID,
        subject: str,
        message: str,
        inquiry_type: str = "general",
        preferred_date: Optional[str] = None,
        phone: Optional[str] = None
    ) -> MessageResponse:
        payload = {
            "propertyId": str(property_id),
            "subject": subject,
            "message": message,
            "inquiryType": inquiry_type,
        }
        if preferred_date is not None:
            payload["preferredDate"] = preferred_date
        if phone is not None:
            payload["phone"] = phone

        body = await self._request("POST", "/message/send", session, json=payload)
        return MessageResponse.model_validate(body["data"])

    async def my_messages(self, session: Session) -> List[MessageResponse]:
        body = await self._request("GET", "/message/my-messages", session)
        return [MessageResponse.model_validate(item) for item in body["data"]]

    async def property_messages(self, session: Session, property_id: uuid.UUID) -> List[MessageResponse]:
        body = await self._request("GET", f"/message/property/{property_id}", session)
        return [MessageResponse.model_validate(item) for item in body["data"]]

    async def mark_read(self, session: Session, message_id: uuid.UUID) -> MessageResponse:
        body = await self._request("PUT", f"/message/mark-read/{message_id}", session)
        return MessageResponse.model_validate(body["data"])

    async def reply(
        self,
        session: Session,
        message_id: uuid.UUID,
        message: str,
        subject: Optional[str] = None
    ) -> MessageResponse:
        payload = {"message": message}
        if subject is not None:
            payload["subject"] = subject
        body = await self._request("POST", f"/message/reply/{message_id}", session, json=payload)
        return MessageResponse.model_validate(body["data"])

    async def delete_message(self, session: Session, message_id: uuid.UUID) -> None:
        await self._request("DELETE", f"/message/delete/{message_id}", session)

    # Favorites

    async def get_favorites(
        self,
        session: Session,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[uuid.UUID], List[PropertyResponse], PaginationMeta]:
        body = await self._request(
            "GET", f"/favorites/{session.user_id}", session, params={"page": page, "limit": limit}
        )
        return (
            [uuid.UUID(pid) for pid in body["favorites"]],
            _properties(body["properties"]),
            PaginationMeta.model_validate(body["pagination"])
        )

    async def set_favorites(self, session: Session, property_ids: Sequence[uuid.UUID]) -> List[uuid.UUID]:
        body = await self._request(
            "PUT", f"/favorites/{session.user_id}", session, json={"favorites": [str(pid) for pid in property_ids]}
        )
        return [uuid.UUID(pid) for pid in body["favorites"]]

    async def add_favorite(self, session: Session, property_id: uuid.UUID) -> List[uuid.UUID]:
        body = await self._request(
            "POST", f"/favorites/{session.user_id}/add", session, json={"propertyId": str(property_id)}
        )
        return [uuid.UUID(pid) for pid in body["favorites"]]

    async def remove_favorite(self, session: Session, property_id: uuid.UUID) -> List[uuid.UUID]:
        body = await self._request("DELETE", f"/favorites/{session.user_id}/remove/{property_id}", session)
        return [uuid.UUID(pid) for pid in body["favorites"]]

    # Reviews

    async def list_reviews(self, limit: Optional[int] = None) -> List[ReviewResponse]:
        params = {"limit": limit} if limit is not None else None
        body = await self._request("GET", "/reviews", params=params)
        return [ReviewResponse.model_validate(item) for item in body["data"]]

    async def create_review(self, session: Session, comment: str) -> ReviewResponse:
        body = await self._request("POST", "/reviews", session, json={"comment": comment})
        return ReviewResponse.model_validate(body["data"])

    async def update_review(self, session: Session, review_id: uuid.UUID, comment: str) -> ReviewResponse:
        body = await self._request("PUT", f"/reviews/{review_id}", session, json={"comment": comment})
        return ReviewResponse.model_validate(body["data"])

    async def delete_review(self, session: Session, review_id: uuid.UUID) -> None:
        await self._request("DELETE", f"/reviews/{review_id}", session)


def _session(payload: Dict[str, Any]) -> Session:
    return Session(token=payload["authtoken"], user=UserResponse.model_validate(payload["user"]))


def _properties(items: List[Dict[str, Any]]) -> List[PropertyResponse]:
    return [PropertyResponse.model_validate(item) for item in items]


def _files(images: Sequence[ImageUpload]) -> List[Tuple[str, ImageUpload]]:
    return [("images", image) for image in images]


def _camel(values: Dict[str, Any]) -> Dict[str, Any]:
    converted = {}
    for key, value in values.items():
        head, *rest = key.split("_")
        converted[head + "".join(part.capitalize() for part in rest)] = value
    return converted


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return getattr(value, "value", value)
