"""Client side of the name generator: input checks, request state and rendering.

``ClientSession`` owns the whole request lifecycle as one explicit state value.
States only change through ``_transition``, which refuses moves that are not in
``TRANSITIONS``. The session is synchronous; a lock makes the
"already generating" guard safe when a UI calls ``submit`` from several threads.
"""
import logging
import sys
import threading
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional

import requests

from .models import NameSuggestion
from .validator import NameValidationError, validate_name

logger = logging.getLogger(__name__)

GENERATION_TIMEOUT = 30  # seconds, browser-to-server budget
GENERATE_PATH = "/generate-name"

TIMEOUT_MESSAGE = "Request timed out. Please check your network connection and try again."
NETWORK_MESSAGE = "Network error. Please check your connection and try again."
GENERIC_MESSAGE = "An error occurred while generating Chinese names. Please try again later."
NO_DATA_MESSAGE = "No valid Chinese name data was received."
DUPLICATE_MESSAGE = "You just generated names for this name. Please try a different name or wait a moment."
BUSY_MESSAGE = "Names are already being generated. Please wait."
SUCCESS_MESSAGE = "Chinese names generated successfully! Check out the recommendations below."


class SessionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    AWAITING_RESPONSE = "awaiting_response"
    RENDERING = "rendering"
    ERROR = "error"


TRANSITIONS: Dict[SessionState, FrozenSet[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.VALIDATING}),
    SessionState.VALIDATING: frozenset({SessionState.SUBMITTING, SessionState.ERROR, SessionState.IDLE}),
    SessionState.SUBMITTING: frozenset({SessionState.AWAITING_RESPONSE, SessionState.ERROR}),
    SessionState.AWAITING_RESPONSE: frozenset({SessionState.RENDERING, SessionState.ERROR}),
    SessionState.RENDERING: frozenset({SessionState.IDLE}),
    SessionState.ERROR: frozenset({SessionState.IDLE}),
}


class IllegalTransition(RuntimeError):
    pass


class GenerationFailed(Exception):
    """Raised internally to route a failed request into the ERROR state."""


def format_card(suggestion: NameSuggestion, index: int) -> str:
    return (
        f"[{index + 1}] {suggestion.chineseName} ({suggestion.pinyin})\n"
        f"    Chinese Meaning: {suggestion.chineseMeaning}\n"
        f"    English Meaning: {suggestion.englishMeaning}"
    )


def print_cards(names: List[NameSuggestion]) -> None:
    print("\n\n".join(format_card(s, i) for i, s in enumerate(names)))


def log_message(message: str, kind: str = "info") -> None:
    level = logging.ERROR if kind == "error" else logging.INFO
    logger.log(level, message)


class ClientSession:
    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = GENERATION_TIMEOUT,
        http: Optional[requests.Session] = None,
        renderer: Callable[[List[NameSuggestion]], None] = print_cards,
        notifier: Callable[[str, str], None] = log_message,
    ):
        self.endpoint = base_url.rstrip("/") + GENERATE_PATH
        self.timeout = timeout
        self.http = http or requests.Session()
        self.http.headers.update({"Content-Type": "application/json"})
        self.renderer = renderer
        self.notifier = notifier

        self.state = SessionState.IDLE
        self.last_generated_name = ""
        self.results_visible = False
        self._lock = threading.Lock()

    @property
    def is_generating(self) -> bool:
        return self.state in (
            SessionState.SUBMITTING,
            SessionState.AWAITING_RESPONSE,
            SessionState.RENDERING,
        )

    def _transition(self, target: SessionState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise IllegalTransition(f"{self.state.value} -> {target.value}")
        logger.debug(f"[Client] {self.state.value} -> {target.value}")
        self.state = target

    def _fail(self, message: str) -> None:
        self._transition(SessionState.ERROR)
        self.notifier(message, "error")
        self._transition(SessionState.IDLE)

    def submit(self, raw_name: str) -> Optional[List[NameSuggestion]]:
        """Validate and send one name. Returns the rendered names, or None if nothing was rendered."""
        with self._lock:
            if self.state is not SessionState.IDLE:
                self.notifier(BUSY_MESSAGE, "info")
                return None
            self._transition(SessionState.VALIDATING)

        try:
            candidate = validate_name(raw_name)
        except NameValidationError as e:
            self._fail(e.message)
            return None

        if candidate == self.last_generated_name and self.results_visible:
            self.notifier(DUPLICATE_MESSAGE, "info")
            self._transition(SessionState.IDLE)
            return None

        self._transition(SessionState.SUBMITTING)
        self.results_visible = False
        try:
            names = self._request(candidate)
        except GenerationFailed as e:
            self._fail(str(e))
            return None

        self._transition(SessionState.RENDERING)
        try:
            self.renderer(names)
            self.results_visible = True
            self.last_generated_name = candidate
        finally:
            self._transition(SessionState.IDLE)
        self.notifier(SUCCESS_MESSAGE, "success")
        return names

    def _request(self, candidate: str) -> List[NameSuggestion]:
        self._transition(SessionState.AWAITING_RESPONSE)
        try:
            # requests applies the timeout to connect and to each read, not to the whole call.
            response = self.http.post(self.endpoint, json={"englishName": candidate}, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error(f"[Client] Request to {self.endpoint} timed out after {self.timeout} seconds.")
            raise GenerationFailed(TIMEOUT_MESSAGE) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"[Client] Request to {self.endpoint} failed: {e}")
            raise GenerationFailed(NETWORK_MESSAGE) from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.ok:
            raise GenerationFailed(data.get("message") or f"HTTP error: {response.status_code}")
        if not data.get("success"):
            raise GenerationFailed(data.get("message") or GENERIC_MESSAGE)

        raw_names = data.get("names")
        if not isinstance(raw_names, list) or not raw_names:
            raise GenerationFailed(NO_DATA_MESSAGE)
        try:
            return [NameSuggestion(**item) for item in raw_names]
        except (TypeError, ValueError) as e:
            raise GenerationFailed(NO_DATA_MESSAGE) from e


# This block allows you to run the client directly against a running server
if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] [%(module)s] %(message)s',
        handlers=[logging.StreamHandler()]
    )

    if len(sys.argv) < 2:
        print("usage: python -m chinese_namer.client NAME [BASE_URL]")
        sys.exit(2)

    base_url = sys.argv[2] if len(sys.argv) > 2 else "http://localhost:3000"
    session = ClientSession(base_url=base_url)
    result = session.submit(sys.argv[1])
    sys.exit(0 if result else 1)
