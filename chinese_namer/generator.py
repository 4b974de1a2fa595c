from __future__ import annotations

import logging

from .llm_service import ModelClient, ModelClientError
from .models import GenerationOutcome, NameCandidate
from .normalizer import PipelineInput, normalize_outcome
from .parser import MalformedPayload, parse_response
from .prompt import build_prompt

logger = logging.getLogger(__name__)


class NameGenerator:
    """Run one candidate through prompt -> model -> parse -> normalize."""

    def __init__(self, model_client: ModelClient):
        self.model_client = model_client

    async def generate(self, candidate: NameCandidate) -> GenerationOutcome:
        logger.info(f"Generating Chinese names for '{candidate}'")
        prompt = build_prompt(candidate)

        records: PipelineInput
        try:
            raw = await self.model_client.complete(prompt)
            records = parse_response(raw)
        except (ModelClientError, MalformedPayload) as exc:
            records = exc

        outcome = normalize_outcome(records, candidate)
        logger.info(f"Produced {len(outcome.names)} names for '{candidate}' from {outcome.source}")
        return outcome
