from typing import Any, Dict, List, Union
import logging

from .fallback import lookup
from .llm_service import ModelClientError
from .models import (
    SUGGESTION_FIELDS,
    SUGGESTION_SET_SIZE,
    GenerationOutcome,
    NameCandidate,
    NameSuggestion,
)
from .parser import MalformedPayload

logger = logging.getLogger(__name__)

ALTERNATE_MARKER = "(alternate)"

PipelineInput = Union[List[Any], MalformedPayload, ModelClientError]


def is_complete(record: Any) -> bool:
    """A record is usable only if every suggestion field is a non-blank string."""
    if not isinstance(record, dict):
        return False
    return all(
        isinstance(record.get(field), str) and record[field].strip()
        for field in SUGGESTION_FIELDS
    )


def _to_suggestion(record: Dict[str, Any]) -> NameSuggestion:
    return NameSuggestion(**{field: record[field] for field in SUGGESTION_FIELDS})


def _fallback(candidate: NameCandidate) -> GenerationOutcome:
    return GenerationOutcome(names=lookup(candidate), source="fallback")


def normalize_outcome(records: PipelineInput, candidate: NameCandidate) -> GenerationOutcome:
    """Reduce whatever the pipeline produced to exactly three complete suggestions.

    Never raises. Upstream errors and record lists with no complete entry are
    answered from the fallback catalog. One or two complete records are padded
    with copies of the last one, marked as alternates; extra records are dropped.
    """
    if isinstance(records, Exception):
        logger.info(f"[LLM] Using fallback names for '{candidate}' after {type(records).__name__}: {records}")
        return _fallback(candidate)
    if not isinstance(records, list):
        logger.warning(f"[LLM] Unexpected pipeline result {type(records).__name__}; using fallback names")
        return _fallback(candidate)

    valid = [_to_suggestion(r) for r in records if is_complete(r)]
    if not valid:
        logger.warning(f"[LLM] No complete name records for '{candidate}'; using fallback names")
        return _fallback(candidate)

    if len(valid) < SUGGESTION_SET_SIZE:
        last = valid[-1]
        alternate = last.model_copy(update={"chineseName": last.chineseName + ALTERNATE_MARKER})
        valid.extend([alternate] * (SUGGESTION_SET_SIZE - len(valid)))

    return GenerationOutcome(names=valid[:SUGGESTION_SET_SIZE], source="model")


def normalize_suggestions(records: PipelineInput, candidate: NameCandidate) -> List[NameSuggestion]:
    return normalize_outcome(records, candidate).names
