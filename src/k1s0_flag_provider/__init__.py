"""k1s0 flag provider library."""

from .classifier import classify_error, reason_for, should_propagate
from .client import TreatmentClientProtocol
from .coercion import (
    COERCERS,
    coerce_boolean,
    coerce_double,
    coerce_integer,
    coerce_object,
    coerce_string,
    coerce_structure,
)
from .config import ImpressionsSection, LogSection, ProviderConfig, load_config
from .exceptions import (
    ConfigError,
    FlagNotFoundError,
    GeneralError,
    InvalidContextError,
    MarshalError,
    ParseError,
    ProviderError,
    ProviderErrorCodes,
    TargetingKeyMissingError,
)
from .factory import ProviderBundle, create_provider
from .hooks import Hook, HookContext, LoggingHook
from .impressions import HttpImpressionsSender, Impression, ImpressionsHook, ImpressionsStorage
from .logger import new_logger
from .marshal import (
    dict_to_structure,
    object_to_value,
    structure_to_dict,
    value_to_object,
)
from .memory import InMemoryTreatmentClient
from .models import (
    ErrorKind,
    EvaluationResult,
    FlagType,
    ProviderMetadata,
    RawTreatment,
    Reason,
    TargetingContext,
    TrackingDetails,
)
from .provider import FlagProvider
from .value import (
    BoolValue,
    FloatValue,
    InstantValue,
    IntValue,
    ListValue,
    NullValue,
    StrValue,
    StructureValue,
    Value,
    ValueKind,
)

__all__ = [
    "BoolValue",
    "COERCERS",
    "ConfigError",
    "ErrorKind",
    "EvaluationResult",
    "FlagNotFoundError",
    "FlagProvider",
    "FlagType",
    "FloatValue",
    "GeneralError",
    "Hook",
    "HookContext",
    "HttpImpressionsSender",
    "Impression",
    "ImpressionsHook",
    "ImpressionsSection",
    "ImpressionsStorage",
    "InMemoryTreatmentClient",
    "InstantValue",
    "IntValue",
    "InvalidContextError",
    "ListValue",
    "LogSection",
    "LoggingHook",
    "MarshalError",
    "NullValue",
    "ParseError",
    "ProviderBundle",
    "ProviderConfig",
    "ProviderError",
    "ProviderErrorCodes",
    "ProviderMetadata",
    "RawTreatment",
    "Reason",
    "StrValue",
    "StructureValue",
    "TargetingContext",
    "TargetingKeyMissingError",
    "TrackingDetails",
    "TreatmentClientProtocol",
    "Value",
    "ValueKind",
    "classify_error",
    "coerce_boolean",
    "coerce_double",
    "coerce_integer",
    "coerce_object",
    "coerce_string",
    "coerce_structure",
    "create_provider",
    "dict_to_structure",
    "load_config",
    "new_logger",
    "object_to_value",
    "reason_for",
    "should_propagate",
    "structure_to_dict",
    "value_to_object",
]
