import asyncio
import logging
from typing import Any, Optional

import openai
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


class ModelClientError(Exception):
    """Base class for failures talking to the completion endpoint."""


class ModelTimeout(ModelClientError):
    """No answer within the call budget. The in-flight request has been cancelled."""


class UpstreamError(ModelClientError):
    """Non-success status, transport failure, or a response without usable content."""


class ModelClient:
    """Single-shot chat completion against an OpenAI-compatible endpoint.

    One request per call and no retries: any failure is raised as a
    ModelClientError and the caller falls back to static names.
    """

    def __init__(self, settings: Optional[Settings] = None, llm: Any = None):
        self.settings = settings or get_settings()
        self.timeout = self.settings.llm_timeout_seconds

        if llm is not None:
            self.llm = llm
        elif self.settings.siliconflow_api_key:
            self.llm = ChatOpenAI(
                model=self.settings.llm_model,
                base_url=self.settings.siliconflow_api_url,
                api_key=self.settings.siliconflow_api_key,
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
                top_p=self.settings.top_p,
                timeout=self.timeout,
                max_retries=0,
            )
        else:
            self.llm = None

    async def complete(self, prompt: str) -> str:
        """Send `prompt` as the only user message and return the stripped reply text."""
        if self.llm is None:
            raise UpstreamError("SILICONFLOW_API_KEY is not configured")

        logger.info(f"[LLM] Sending request to {self.settings.llm_model}")
        try:
            # wait_for cancels the request task on expiry, which closes the HTTP call.
            response = await asyncio.wait_for(
                self.llm.ainvoke([HumanMessage(content=prompt)]), timeout=self.timeout
            )
        except asyncio.TimeoutError as exc:
            logger.error(f"[LLM] No response within {self.timeout}s; request cancelled")
            raise ModelTimeout(f"Model call exceeded {self.timeout}s") from exc
        except openai.APITimeoutError as exc:
            logger.error(f"[LLM] Endpoint timed out: {exc}")
            raise ModelTimeout(str(exc)) from exc
        except openai.APIStatusError as exc:
            logger.error(f"[LLM] Endpoint returned status {exc.status_code}: {exc}")
            raise UpstreamError(f"Endpoint returned status {exc.status_code}") from exc
        except openai.OpenAIError as exc:
            logger.error(f"[LLM] Request failed: {exc}")
            raise UpstreamError(str(exc)) from exc
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            # Raised by the client library when the response envelope has no choices.
            logger.error(f"[LLM] Malformed response envelope: {exc}")
            raise UpstreamError("Malformed response envelope") from exc
        except Exception as exc:
            logger.error(f"[LLM] Unexpected failure from chat model: {exc!r}")
            raise UpstreamError(f"Chat model failed: {type(exc).__name__}") from exc

        content = getattr(response, "content", None)
        if not isinstance(content, str) or not content.strip():
            logger.error("[LLM] Response carried no message content")
            raise UpstreamError("Response carried no message content")

        logger.info("[LLM] Received response")
        return content.strip()
