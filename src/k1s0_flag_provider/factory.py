"""FlagProvider の組み立て"""

from __future__ import annotations

from dataclasses import dataclass

from .client import TreatmentClientProtocol
from .config import ProviderConfig
from .hooks import Hook, LoggingHook
from .impressions import HttpImpressionsSender, ImpressionsHook, ImpressionsStorage
from .logger import new_logger
from .provider import FlagProvider


@dataclass
class ProviderBundle:
    """create_provider が組み立てたオブジェクト一式。"""

    provider: FlagProvider
    storage: ImpressionsStorage | None = None
    sender: HttpImpressionsSender | None = None


def create_provider(
    client: TreatmentClientProtocol,
    config: ProviderConfig | None = None,
) -> ProviderBundle:
    """設定からロガーとフックを構成し、注入されたクライアントで FlagProvider を生成する。

    impressions セクションがある場合は ImpressionsHook とそのストレージ、
    送信クライアントも生成する。送信タイミングは呼び出し側が決める。
    """
    config = config or ProviderConfig()
    logger = new_logger(level=config.log.level, format=config.log.format)

    hooks: list[Hook] = [LoggingHook(logger)]
    storage: ImpressionsStorage | None = None
    sender: HttpImpressionsSender | None = None
    if config.impressions is not None:
        storage = ImpressionsStorage(max_size=config.impressions.max_buffer_size)
        sender = HttpImpressionsSender(config.impressions)
        hooks.append(ImpressionsHook(storage, source=config.name))

    provider = FlagProvider(client, hooks=hooks, name=config.name)
    return ProviderBundle(provider=provider, storage=storage, sender=sender)
