from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import cloudinary.utils
import httpx

from config import settings
from services.errors import UploadError

from .gateway import ImageUpload, StoredImage

logger = logging.getLogger(__name__)


class CloudinaryImageStore:
    """Uploads and deletes images through Cloudinary's signed REST API."""

    def __init__(
        self,
        *,
        cloud_name: Optional[str] = settings.CLOUDINARY_CLOUD_NAME,
        api_key: Optional[str] = settings.CLOUDINARY_API_KEY,
        api_secret: Optional[str] = settings.CLOUDINARY_API_SECRET,
        folder: str = settings.IMAGE_UPLOAD_FOLDER,
        base_url: str = settings.CLOUDINARY_API_BASE_URL,
        timeout: float = settings.IMAGE_UPLOAD_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not all([cloud_name, api_key, api_secret]):
            raise RuntimeError(
                "Cloudinary is not configured. Set CLOUDINARY_CLOUD_NAME, "
                "CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET."
            )
        self._endpoint = f"{base_url.rstrip('/')}/{cloud_name}/image"
        self._api_key = api_key
        self._api_secret = api_secret
        self._folder = folder
        self._timeout = timeout
        self._transport = transport

    def sign(self, params: Dict[str, Any]) -> str:
        return cloudinary.utils.api_sign_request(params, self._api_secret)

    def _signed_form(self, params: Dict[str, Any]) -> Dict[str, Any]:
        params = {**params, "timestamp": int(time.time())}
        return {
            **params,
            "api_key": self._api_key,
            "signature": self.sign(params),
        }

    async def _post(self, action: str, data: Dict[str, Any], files=None) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(f"{self._endpoint}/{action}", data=data, files=files)
            except httpx.HTTPError as exc:
                raise UploadError(f"Image store unreachable: {exc.__class__.__name__}") from exc

        if response.status_code >= 400:
            try:
                detail = response.json().get("error", {}).get("message")
            except ValueError:
                detail = None
            logger.warning(
                "Cloudinary %s failed with status %s: %s",
                action,
                response.status_code,
                detail or response.text[:200],
            )
            # A 400 means the file itself was refused; anything else is the store's fault.
            raise UploadError(
                detail or "Image store rejected the request",
                status_code=400 if response.status_code == 400 else None,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UploadError("Image store returned an unreadable response") from exc

    async def upload(self, image: ImageUpload) -> StoredImage:
        data = self._signed_form({"folder": self._folder})
        files = {
            "file": (
                image.filename or "upload",
                image.content,
                image.content_type or "application/octet-stream",
            )
        }
        payload = await self._post("upload", data, files=files)

        url = payload.get("secure_url") or payload.get("url")
        public_id = payload.get("public_id")
        if not url or not public_id:
            raise UploadError("Image store returned an incomplete response")
        return StoredImage(url=url, public_id=public_id)

    async def delete(self, public_id: str) -> None:
        data = self._signed_form({"public_id": public_id})
        payload = await self._post("destroy", data)
        result = payload.get("result")
        if result not in {"ok", "not found"}:
            raise UploadError(f"Image store could not delete image: {result}")
        if result == "not found":
            logger.info("Image %s was already absent from the image store", public_id)
