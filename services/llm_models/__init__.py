"""
LLM Pydantic Models

Structured models for the analyze endpoint:
- Translation models (TranslationItem, TranslationResponse)
- Request model (AnalyzeRequest)
"""

from .translation_models import AnalyzeRequest, TranslationItem, TranslationResponse

__all__ = [
    'AnalyzeRequest',
    'TranslationItem',
    'TranslationResponse',
]
