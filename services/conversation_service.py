"""
Conversation and version history for one generation session.

A session moves between four states:

    empty --submit--> awaiting-first-response --ok--> refining
                                              --error--> empty
    refining --submit--> awaiting-refinement-response --ok/error--> refining

Only one request may be in flight per session; a submit during a request is
ignored. Every failure becomes a single assistant error message and the
session stays usable.
"""
import logging
import uuid
from enum import Enum
from typing import Dict, List, Optional, Set

from models.conversation import Message, MessageRole, VersionHistoryEntry
from models.generation import GeneratedCode, GenerationOptions
from prompts.generation_prompts import (
    GENERATION_ERROR_MESSAGE,
    INITIAL_ACKNOWLEDGEMENT,
    REFINEMENT_ACKNOWLEDGEMENT,
    RESTORE_MESSAGE,
)
from services.exceptions import NotFoundError
from services.generation_service import GenerationService

logger = logging.getLogger(__name__)


class ConversationState(str, Enum):
    EMPTY = "empty"
    AWAITING_FIRST_RESPONSE = "awaiting-first-response"
    REFINING = "refining"
    AWAITING_REFINEMENT_RESPONSE = "awaiting-refinement-response"


class ConversationSession:
    def __init__(
        self,
        generation_service: GenerationService,
        session_id: Optional[str] = None,
        default_options: Optional[GenerationOptions] = None,
    ):
        self.id = session_id or str(uuid.uuid4())
        self.generation_service = generation_service
        self.default_options = default_options
        self.state = ConversationState.EMPTY
        self.is_refining = False
        self.current_code: Optional[GeneratedCode] = None
        self._messages: List[Message] = []
        self._versions: List[VersionHistoryEntry] = []
        self._active_request_id: Optional[str] = None
        self._handled_requests: Set[str] = set()
        # request id of each assistant message, for duplicate suppression
        self._message_requests: Dict[str, str] = {}

    @property
    def messages(self) -> List[Message]:
        return list(self._messages)

    @property
    def version_history(self) -> List[VersionHistoryEntry]:
        return list(self._versions)

    @property
    def is_generating(self) -> bool:
        return self._active_request_id is not None

    def _add_message(self, role: MessageRole, content: str, request_id: Optional[str] = None) -> Optional[Message]:
        if role == MessageRole.ASSISTANT and self._messages:
            last = self._messages[-1]
            if (
                last.role == MessageRole.ASSISTANT
                and last.content == content
                and request_id is not None
                and self._message_requests.get(last.id) == request_id
            ):
                logger.warning(f"[{self.id}] Suppressed duplicate assistant message for request {request_id}")
                return None

        message = Message(role=role, content=content)
        self._messages.append(message)
        if request_id is not None:
            self._message_requests[message.id] = request_id
        return message

    async def submit(self, prompt: str, options: Optional[GenerationOptions] = None) -> Optional[GeneratedCode]:
        """
        Send a user message and wait for the generated code.

        Returns the new code, or None if the submission was ignored (blank
        prompt, request already in flight) or the generation failed.
        """
        if not prompt or not prompt.strip():
            logger.debug(f"[{self.id}] Ignoring blank prompt")
            return None
        if self.is_generating:
            logger.warning(f"[{self.id}] Submission ignored, a generation request is already in flight")
            return None

        options = options or self.default_options
        # History sent to the LLM is everything before this message; the new
        # prompt goes in separately as the requested change.
        history = self.messages if self.is_refining else []
        request_id = self.start_request(prompt)

        try:
            code = await self.generation_service.generate(prompt, options, history)
        except Exception as e:
            logger.error(f"[{self.id}] Generation failed for request {request_id}: {e}", exc_info=True)
            self.handle_generation_failure(request_id, e)
            return None

        self.handle_generation_success(request_id, prompt, code)
        return code

    def start_request(self, prompt: str) -> str:
        """
        Append the user message and mark a new request as in flight. Returns
        the request id the success or failure handler must be called with.
        """
        request_id = str(uuid.uuid4())
        self._active_request_id = request_id
        self.state = (
            ConversationState.AWAITING_REFINEMENT_RESPONSE
            if self.is_refining
            else ConversationState.AWAITING_FIRST_RESPONSE
        )
        self._add_message(MessageRole.USER, prompt)
        logger.info(f"[{self.id}] Request {request_id} submitted in state {self.state.value}")
        return request_id

    def handle_generation_success(self, request_id: str, prompt: str, code: GeneratedCode) -> Optional[VersionHistoryEntry]:
        """Record a successful response. A second call for the same request is a no-op."""
        if request_id in self._handled_requests:
            logger.warning(f"[{self.id}] Request {request_id} already handled, ignoring success")
            return None
        if request_id != self._active_request_id:
            logger.warning(f"[{self.id}] Ignoring success for request {request_id}, which is not in flight")
            return None
        self._handled_requests.add(request_id)

        entry = VersionHistoryEntry(prompt=prompt, code=code)
        self._versions.append(entry)
        self.current_code = code

        acknowledgement = REFINEMENT_ACKNOWLEDGEMENT if self.is_refining else INITIAL_ACKNOWLEDGEMENT
        self.is_refining = True
        self.state = ConversationState.REFINING
        self._finish_request(request_id)
        self._add_message(MessageRole.ASSISTANT, acknowledgement, request_id)

        logger.info(f"[{self.id}] Stored version {len(self._versions)} ({entry.id})")
        return entry

    def handle_generation_failure(self, request_id: str, error: Optional[Exception] = None) -> None:
        """Record a failed request. current_code and history stay as they were."""
        if request_id in self._handled_requests:
            logger.warning(f"[{self.id}] Request {request_id} already handled, ignoring failure")
            return
        if request_id != self._active_request_id:
            logger.warning(f"[{self.id}] Ignoring failure for request {request_id}, which is not in flight")
            return
        self._handled_requests.add(request_id)

        self.state = ConversationState.REFINING if self.is_refining else ConversationState.EMPTY
        self._finish_request(request_id)
        self._add_message(MessageRole.ASSISTANT, GENERATION_ERROR_MESSAGE, request_id)

        if error is not None:
            logger.info(f"[{self.id}] Back to {self.state.value} after {type(error).__name__}")

    def _finish_request(self, request_id: str) -> None:
        if self._active_request_id == request_id:
            self._active_request_id = None

    def restore_version(self, version_id: str) -> Optional[GeneratedCode]:
        """
        Make a stored version the current code. History and the message log
        are left untouched apart from one informational message.
        """
        if self.is_generating:
            logger.warning(f"[{self.id}] Restore ignored, a generation request is in flight")
            return None

        entry = next((v for v in self._versions if v.id == version_id), None)
        if entry is None:
            raise NotFoundError(f"Version '{version_id}' not found")

        self.current_code = entry.code
        self._add_message(
            MessageRole.ASSISTANT,
            RESTORE_MESSAGE.format(
                timestamp=entry.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                prompt=entry.prompt[:60],
            ),
        )
        logger.info(f"[{self.id}] Restored version {entry.id}")
        return entry.code


class SessionStore:
    """In-process registry of independent sessions."""

    def __init__(self, generation_service: Optional[GenerationService] = None):
        self.generation_service = generation_service or GenerationService()
        self._sessions: Dict[str, ConversationSession] = {}

    def create(self, default_options: Optional[GenerationOptions] = None) -> ConversationSession:
        session = ConversationSession(self.generation_service, default_options=default_options)
        self._sessions[session.id] = session
        logger.info(f"Created session {session.id}")
        return session

    def get(self, session_id: str) -> ConversationSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"Session '{session_id}' not found")
        return session

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)
