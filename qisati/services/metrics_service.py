"""
민팅/수집/오디오 이벤트 카운터 (베스트-에포트)

Redis에 UTC 일자별 카운터를 올리고 같은 이벤트를 JSON 로그로 남긴다.
Redis 장애는 요청 흐름에 영향을 주지 않는다.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any

logger = logging.getLogger("metrics")

COUNTER_TTL_SECONDS = 86400


def counter_key(name: str, labels: Dict[str, Any] | None = None, day: str | None = None) -> str:
    """metrics:counter:<이벤트>:<YYYYMMDD>[:k=v...]"""
    day = day or datetime.now(timezone.utc).strftime("%Y%m%d")
    key = f"metrics:counter:{name}:{day}"
    if labels:
        key += ":" + ":".join(f"{k}={v}" for k, v in sorted((str(k), str(v)) for k, v in labels.items()))
    return key


async def increment_counter(name: str, *, labels: Dict[str, Any] | None = None) -> None:
    from qisati.core.database import redis_client

    key = counter_key(name, labels)
    try:
        await redis_client.incr(key)
        await redis_client.expire(key, COUNTER_TTL_SECONDS)
    except Exception as e:
        logger.debug(f"counter skipped key={key}: {e}")
    logger.info(json.dumps({"type": "counter", "name": name, "labels": labels or {}}))
