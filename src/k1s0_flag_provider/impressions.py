"""インプレッションの記録と HTTP 送信"""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from .config import ImpressionsSection
from .exceptions import ProviderError, ProviderErrorCodes
from .hooks import Hook, HookContext
from .models import CONTROL_TREATMENT, EvaluationResult

logger = structlog.get_logger(__name__)

DEFAULT_MAX_IMPRESSIONS = 30000


@dataclass(frozen=True)
class Impression:
    """1 回の評価で返したトリートメントの記録。"""

    key_name: str
    feature: str
    treatment: str
    time: int
    label: str
    source: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "keyName": self.key_name,
            "treatment": self.treatment,
            "time": self.time,
            "label": self.label,
        }


class ImpressionsStorage:
    """上限付きのインメモリインプレッションバッファ。満杯時は最も古いものを捨てる。"""

    def __init__(self, max_size: int = DEFAULT_MAX_IMPRESSIONS) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self._queue: deque[Impression] = deque(maxlen=max_size)
        self._lock = threading.Lock()

    def push(self, impression: Impression) -> None:
        with self._lock:
            self._queue.append(impression)

    def pop_all(self) -> list[Impression]:
        """バッファ内の全インプレッションを取り出して空にする。"""
        with self._lock:
            items = list(self._queue)
            self._queue.clear()
        return items

    def requeue(self, impressions: list[Impression]) -> None:
        """送信に失敗したインプレッションを既存分より古いものとして戻す。"""
        with self._lock:
            pending = list(self._queue)
            self._queue.clear()
            self._queue.extend(impressions)
            self._queue.extend(pending)

    def __len__(self) -> int:
        return len(self._queue)


class ImpressionsHook(Hook):
    """評価結果ごとにインプレッションをストレージへ記録するフック。"""

    def __init__(self, storage: ImpressionsStorage, source: str = "") -> None:
        self._storage = storage
        self._source = source

    def after(self, hook_context: HookContext, result: EvaluationResult[Any]) -> None:
        self._storage.push(
            Impression(
                key_name=hook_context.context.targeting_key or "",
                feature=hook_context.flag_key,
                treatment=result.variant or CONTROL_TREATMENT,
                time=int(time.time() * 1000),
                label=str(result.reason),
                source=self._source or hook_context.provider_name,
            )
        )


def group_by_feature(impressions: list[Impression]) -> list[dict[str, Any]]:
    """インプレッションをフラグ単位にまとめた送信ペイロードを作る。"""
    grouped: dict[str, list[dict[str, Any]]] = {}
    for impression in impressions:
        grouped.setdefault(impression.feature, []).append(impression.to_dict())
    return [
        {"testName": feature, "keyImpressions": entries}
        for feature, entries in grouped.items()
    ]


class HttpImpressionsSender:
    """httpx を使ったインプレッション送信クライアント。"""

    def __init__(self, config: ImpressionsSection) -> None:
        self._config = config
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if config.api_token:
            headers["Authorization"] = f"Bearer {config.api_token}"
        self._headers = headers

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(headers=self._headers, timeout=self._config.timeout_seconds)

    async def send(self, impressions: list[Impression]) -> None:
        """インプレッションを POST する。

        Raises:
            ProviderError: HTTP エラーまたは通信失敗の場合 (IMPRESSIONS_ERROR)
        """
        if not impressions:
            return
        try:
            async with self._make_client() as client:
                resp = await client.post(self._config.url, json=group_by_feature(impressions))
            logger.info(
                "impressions posted",
                url=self._config.url,
                status=resp.status_code,
                count=len(impressions),
            )
            if resp.status_code >= 400:
                raise ProviderError(
                    code=ProviderErrorCodes.IMPRESSIONS_ERROR,
                    message=f"Response from {self._config.url}: HTTP {resp.status_code}",
                )
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(
                code=ProviderErrorCodes.IMPRESSIONS_ERROR,
                message=f"Failed to post impressions to {self._config.url}: {e}",
                cause=e,
            ) from e

    async def flush(self, storage: ImpressionsStorage) -> int:
        """ストレージを空にして送信し、送信件数を返す。

        送信に失敗した場合はインプレッションをストレージへ戻してから例外を送出する。
        """
        impressions = storage.pop_all()
        try:
            await self.send(impressions)
        except ProviderError:
            storage.requeue(impressions)
            logger.warning("impressions requeued", count=len(impressions))
            raise
        return len(impressions)
