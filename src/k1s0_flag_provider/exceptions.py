"""flag_provider ライブラリの例外型定義"""

from __future__ import annotations


class ProviderError(Exception):
    """flag_provider ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class ProviderErrorCodes:
    """ProviderError のエラーコード定数。"""

    TARGETING_KEY_MISSING: str = "TARGETING_KEY_MISSING"
    FLAG_NOT_FOUND: str = "FLAG_NOT_FOUND"
    PARSE_ERROR: str = "PARSE_ERROR"
    GENERAL: str = "GENERAL"
    MARSHAL_ERROR: str = "MARSHAL_ERROR"
    INVALID_CONTEXT: str = "INVALID_CONTEXT"
    IMPRESSIONS_ERROR: str = "IMPRESSIONS_ERROR"
    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"


class TargetingKeyMissingError(ProviderError):
    """評価コンテキストにターゲティングキーが無い。"""

    def __init__(self, message: str = "targeting key is required") -> None:
        super().__init__(ProviderErrorCodes.TARGETING_KEY_MISSING, message)


class FlagNotFoundError(ProviderError):
    """トリートメントが見つからない (空 / control)。"""

    def __init__(self, flag_key: str) -> None:
        super().__init__(ProviderErrorCodes.FLAG_NOT_FOUND, f"flag not found: {flag_key}")
        self.flag_key = flag_key


class ParseError(ProviderError):
    """トリートメントを要求された型へ変換できない。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(ProviderErrorCodes.PARSE_ERROR, message, cause)


class MarshalError(ProviderError):
    """オブジェクトを Value として表現できない。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(ProviderErrorCodes.MARSHAL_ERROR, message, cause)


class GeneralError(ProviderError):
    """その他の予期しない失敗。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(ProviderErrorCodes.GENERAL, message, cause)


class InvalidContextError(ProviderError):
    """track の前提条件 (イベント名 / trafficType) を満たさない。"""

    def __init__(self, message: str) -> None:
        super().__init__(ProviderErrorCodes.INVALID_CONTEXT, message)


class ConfigError(ProviderError):
    """設定ファイルの読み込み・検証エラー。"""
