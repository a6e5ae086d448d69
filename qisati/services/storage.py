import os
import json
import uuid
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any

import aiohttp

from qisati.core.config import settings
from qisati.core.errors import QisatiError, ErrorKind

logger = logging.getLogger(__name__)


def get_upload_dir() -> str:
    """업로드 디렉토리 절대경로 (UPLOAD_DIRECTORY 우선, 없으면 <프로젝트 루트>/data/uploads). 존재를 보장한다."""
    upload_dir = settings.UPLOAD_DIRECTORY or os.getenv("UPLOAD_DIRECTORY")
    if not upload_dir:
        upload_dir = str(Path(__file__).resolve().parents[2] / "data" / "uploads")
    os.makedirs(upload_dir, exist_ok=True)
    return upload_dir


@dataclass
class StoredObject:
    content_id: str
    url: str


class Storage:
    async def save(self, data: bytes, *, filename: Optional[str] = None, content_type: Optional[str] = None) -> StoredObject:
        raise NotImplementedError

    async def pin_json(self, document: Dict[str, Any], *, name: Optional[str] = None) -> StoredObject:
        """JSON 문서(코인 메타데이터 등)를 저장"""
        data = json.dumps(document, ensure_ascii=False).encode("utf-8")
        return await self.save(data, filename=f"{name or uuid.uuid4()}.json", content_type="application/json")


def _extension(filename: Optional[str], content_type: Optional[str]) -> str:
    if filename and "." in filename:
        return "." + filename.rsplit(".", 1)[-1].lower()
    if content_type == "audio/mpeg":
        return ".mp3"
    if content_type == "application/json":
        return ".json"
    if content_type and content_type.startswith("image/"):
        return "." + content_type.split("/", 1)[1]
    return ""


class LocalStorage(Storage):
    def __init__(self, base_dir: str, public_base: str = "/static") -> None:
        self.base_dir = base_dir
        self.public_base = public_base.rstrip("/")
        os.makedirs(self.base_dir, exist_ok=True)

    async def save(self, data: bytes, *, filename: Optional[str] = None, content_type: Optional[str] = None) -> StoredObject:
        name = f"{uuid.uuid4()}{_extension(filename, content_type)}"
        path = os.path.join(self.base_dir, name)
        with open(path, "wb") as f:
            f.write(data)
        return StoredObject(content_id=name, url=f"{self.public_base}/{name}")


class PinataStorage(Storage):
    """IPFS 핀닝 (Pinata pinFileToIPFS / pinJSONToIPFS)"""

    def __init__(
        self,
        *,
        jwt: str,
        api_url: str,
        gateway_url: str,
        json_api_url: Optional[str] = None,
        timeout: float = 60.0,
    ) -> None:
        if not jwt:
            raise RuntimeError("PINATA_JWT is not configured")
        self.headers = {"Authorization": f"Bearer {jwt}"}
        self.api_url = api_url
        self.json_api_url = json_api_url or api_url.replace("pinFileToIPFS", "pinJSONToIPFS")
        self.gateway_url = gateway_url.rstrip("/") + "/"
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def _pin(self, url: str, **request_kwargs: Any) -> StoredObject:
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(url, headers=self.headers, **request_kwargs) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"Pinata upload error {response.status}: {error_text}")
                        raise QisatiError(ErrorKind.EXTERNAL_SERVICE_FAILURE, f"IPFS 업로드 실패 ({response.status})")
                    result = await response.json()
        except aiohttp.ClientError as e:
            logger.error(f"Pinata network error: {e}")
            raise QisatiError(ErrorKind.EXTERNAL_SERVICE_FAILURE, "IPFS 업로드 중 네트워크 오류")

        cid = result.get("IpfsHash")
        if not cid:
            raise QisatiError(ErrorKind.EXTERNAL_SERVICE_FAILURE, "IPFS 응답에 해시가 없습니다.")
        return StoredObject(content_id=cid, url=f"{self.gateway_url}{cid}")

    async def save(self, data: bytes, *, filename: Optional[str] = None, content_type: Optional[str] = None) -> StoredObject:
        name = filename or f"{uuid.uuid4()}{_extension(filename, content_type)}"
        form = aiohttp.FormData()
        form.add_field("file", data, filename=name, content_type=content_type or "application/octet-stream")
        return await self._pin(self.api_url, data=form)

    async def pin_json(self, document: Dict[str, Any], *, name: Optional[str] = None) -> StoredObject:
        body: Dict[str, Any] = {"pinataContent": document}
        if name:
            body["pinataMetadata"] = {"name": name}
        return await self._pin(self.json_api_url, json=body)


def get_storage() -> Storage:
    backend = (settings.STORAGE_BACKEND or "local").lower()
    if backend == "ipfs":
        return PinataStorage(
            jwt=settings.PINATA_JWT or "",
            api_url=settings.PINATA_API_URL,
            gateway_url=settings.PINATA_GATEWAY_URL,
            json_api_url=settings.PINATA_JSON_API_URL,
        )
    # local
    return LocalStorage(base_dir=get_upload_dir(), public_base="/static")
