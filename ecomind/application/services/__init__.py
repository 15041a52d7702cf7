"""Application services: consent store, audit logger, consent gate, prompt building and parsing."""

from ecomind.application.services.audit_logger import AuditLogger
from ecomind.application.services.consent_gate import CONSENT_REQUIRED_MESSAGE, ConsentGate
from ecomind.application.services.privacy_settings_store import PrivacySettingsStore
from ecomind.application.services.prompt_builder import (
    EXTRACTION_PARAMS,
    INSIGHTS_PARAMS,
    SENTIMENT_PARAMS,
    build_extraction_prompt,
    build_insights_prompt,
    build_sentiment_prompt,
    preprocess_embedding_content,
)
from ecomind.application.services.response_parser import (
    extract_json_object,
    parse_context_response,
    parse_insights_response,
    parse_sentiment_response,
)

__all__ = [
    "AuditLogger",
    "CONSENT_REQUIRED_MESSAGE",
    "ConsentGate",
    "PrivacySettingsStore",
    "EXTRACTION_PARAMS",
    "INSIGHTS_PARAMS",
    "SENTIMENT_PARAMS",
    "build_extraction_prompt",
    "build_insights_prompt",
    "build_sentiment_prompt",
    "preprocess_embedding_content",
    "extract_json_object",
    "parse_context_response",
    "parse_insights_response",
    "parse_sentiment_response",
]
