"""
Tests for conversation sessions and version history
"""
import asyncio

import pytest

from conftest import FakeGenerationService, make_code
from models.conversation import MessageRole
from models.generation import GenerationOptions
from prompts.generation_prompts import (
    GENERATION_ERROR_MESSAGE,
    INITIAL_ACKNOWLEDGEMENT,
    REFINEMENT_ACKNOWLEDGEMENT,
)
from services.conversation_service import ConversationSession, ConversationState, SessionStore
from services.exceptions import NotFoundError, ParseError, TransportError


class TestSubmit:
    @pytest.mark.asyncio
    async def test_first_success_enters_refining(self):
        code = make_code("v1")
        session = ConversationSession(FakeGenerationService(code))

        result = await session.submit("A bakery")

        assert result == code
        assert session.state == ConversationState.REFINING
        assert session.is_refining is True
        assert session.is_generating is False
        assert session.current_code == code
        assert len(session.version_history) == 1
        assert session.version_history[0].prompt == "A bakery"
        assert [m.role for m in session.messages] == [MessageRole.USER, MessageRole.ASSISTANT]
        assert session.messages[1].content == INITIAL_ACKNOWLEDGEMENT

    @pytest.mark.asyncio
    async def test_first_request_sends_no_history(self):
        service = FakeGenerationService(make_code())
        session = ConversationSession(service)

        await session.submit("A bakery")

        assert service.calls[0]["prompt"] == "A bakery"
        assert service.calls[0]["conversation"] == []

    @pytest.mark.asyncio
    async def test_refinement_sends_prior_messages(self):
        service = FakeGenerationService(make_code("v1"), make_code("v2"))
        session = ConversationSession(service)

        await session.submit("A bakery")
        await session.submit("Make it pink")

        sent = service.calls[1]["conversation"]
        assert [m.content for m in sent] == ["A bakery", INITIAL_ACKNOWLEDGEMENT]
        assert session.messages[-1].content == REFINEMENT_ACKNOWLEDGEMENT
        assert len(session.version_history) == 2
        assert session.current_code.html == "<p>v2</p>"

    @pytest.mark.asyncio
    async def test_session_default_options_are_used(self):
        options = GenerationOptions(framework="react")
        service = FakeGenerationService(make_code())
        session = ConversationSession(service, default_options=options)

        await session.submit("A bakery")

        assert service.calls[0]["options"] == options

    @pytest.mark.asyncio
    async def test_blank_prompt_is_ignored(self):
        service = FakeGenerationService()
        session = ConversationSession(service)

        assert await session.submit("   ") is None
        assert service.calls == []
        assert session.messages == []
        assert session.state == ConversationState.EMPTY

    @pytest.mark.asyncio
    async def test_initial_failure_returns_to_empty(self):
        session = ConversationSession(FakeGenerationService(TransportError("boom", status_code=500)))

        result = await session.submit("A bakery")

        assert result is None
        assert session.state == ConversationState.EMPTY
        assert session.is_refining is False
        assert session.is_generating is False
        assert session.current_code is None
        assert session.version_history == []
        errors = [m for m in session.messages if m.content == GENERATION_ERROR_MESSAGE]
        assert len(errors) == 1
        assert errors[0].role == MessageRole.ASSISTANT

    @pytest.mark.asyncio
    async def test_refinement_failure_keeps_current_code(self):
        service = FakeGenerationService(make_code("v1"), ParseError("no css", section="css"))
        session = ConversationSession(service)

        await session.submit("A bakery")
        await session.submit("Break it")

        assert session.state == ConversationState.REFINING
        assert session.current_code.html == "<p>v1</p>"
        assert len(session.version_history) == 1
        assert session.messages[-1].content == GENERATION_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_session_usable_after_failure(self):
        service = FakeGenerationService(TransportError("down"), make_code("v1"))
        session = ConversationSession(service)

        await session.submit("A bakery")
        result = await session.submit("A bakery, again")

        assert result.html == "<p>v1</p>"
        assert session.state == ConversationState.REFINING
        # After the failed first attempt nothing has been generated yet
        assert service.calls[1]["conversation"] == []

    @pytest.mark.asyncio
    async def test_submit_while_generating_is_ignored(self):
        release = asyncio.Event()

        class SlowService(FakeGenerationService):
            async def generate(self, prompt, options=None, conversation=None):
                await release.wait()
                return await super().generate(prompt, options, conversation)

        service = SlowService(make_code())
        session = ConversationSession(service)

        first = asyncio.create_task(session.submit("A bakery"))
        await asyncio.sleep(0)
        assert session.is_generating is True
        assert session.state == ConversationState.AWAITING_FIRST_RESPONSE

        assert await session.submit("Another one") is None

        release.set()
        await first
        assert len(service.calls) == 1
        assert [m.content for m in session.messages if m.role == MessageRole.USER] == ["A bakery"]


class TestDuplicateHandling:
    def test_second_success_for_same_request_is_ignored(self):
        session = ConversationSession(FakeGenerationService())
        code = make_code()
        request_id = session.start_request("A bakery")

        first = session.handle_generation_success(request_id, "A bakery", code)
        second = session.handle_generation_success(request_id, "A bakery", code)

        assert first is not None
        assert second is None
        assert len(session.version_history) == 1
        assert [m.role for m in session.messages] == [MessageRole.USER, MessageRole.ASSISTANT]

    def test_failure_after_success_is_ignored(self):
        session = ConversationSession(FakeGenerationService())
        request_id = session.start_request("A bakery")

        session.handle_generation_success(request_id, "A bakery", make_code())
        session.handle_generation_failure(request_id)

        assert session.state == ConversationState.REFINING
        assert [m.content for m in session.messages] == ["A bakery", INITIAL_ACKNOWLEDGEMENT]

    def test_distinct_requests_both_recorded(self):
        session = ConversationSession(FakeGenerationService())

        session.handle_generation_failure(session.start_request("A bakery"))
        session.handle_generation_failure(session.start_request("A bakery"))

        errors = [m for m in session.messages if m.role == MessageRole.ASSISTANT]
        assert [m.content for m in errors] == [GENERATION_ERROR_MESSAGE, GENERATION_ERROR_MESSAGE]

    def test_success_for_request_not_in_flight_is_ignored(self):
        session = ConversationSession(FakeGenerationService())
        active = session.start_request("A bakery")

        assert session.handle_generation_success("stray", "Other", make_code()) is None
        session.handle_generation_failure("stray")

        assert session.state == ConversationState.AWAITING_FIRST_RESPONSE
        assert session.is_generating is True
        assert session.version_history == []
        assert session.current_code is None

        session.handle_generation_success(active, "A bakery", make_code())
        assert session.state == ConversationState.REFINING
        assert session.is_generating is False

    def test_success_with_nothing_in_flight_is_ignored(self):
        session = ConversationSession(FakeGenerationService())

        assert session.handle_generation_success("req-1", "A bakery", make_code()) is None
        assert session.state == ConversationState.EMPTY
        assert session.messages == []


class TestRestore:
    @pytest.mark.asyncio
    async def test_restore_earlier_version(self):
        service = FakeGenerationService(make_code("v1"), make_code("v2"))
        session = ConversationSession(service)
        await session.submit("A bakery")
        await session.submit("Make it pink")
        versions = session.version_history
        message_count = len(session.messages)

        restored = session.restore_version(versions[0].id)

        assert restored == versions[0].code
        assert session.current_code == versions[0].code
        assert len(session.version_history) == 2
        assert len(session.messages) == message_count + 1
        assert session.messages[-1].role == MessageRole.ASSISTANT
        assert "A bakery" in session.messages[-1].content

    @pytest.mark.asyncio
    async def test_restore_single_version(self):
        session = ConversationSession(FakeGenerationService(make_code("v1")))
        await session.submit("A bakery")
        version = session.version_history[0]

        session.restore_version(version.id)

        assert len(session.version_history) == 1
        assert len(session.messages) == 3
        assert session.current_code == version.code

    def test_unknown_version(self):
        session = ConversationSession(FakeGenerationService())
        with pytest.raises(NotFoundError):
            session.restore_version("missing")

    def test_version_entries_are_immutable(self):
        session = ConversationSession(FakeGenerationService())
        entry = session.handle_generation_success(session.start_request("A bakery"), "A bakery", make_code())

        with pytest.raises(Exception):
            entry.prompt = "changed"


class TestSessionStore:
    def test_sessions_are_independent(self):
        store = SessionStore(FakeGenerationService())

        first = store.create()
        second = store.create()
        first.handle_generation_success(first.start_request("A bakery"), "A bakery", make_code())

        assert len(store) == 2
        assert store.get(first.id) is first
        assert second.version_history == []
        assert second.state == ConversationState.EMPTY

    def test_get_and_delete(self):
        store = SessionStore(FakeGenerationService())
        session = store.create()

        assert store.delete(session.id) is True
        assert store.delete(session.id) is False
        with pytest.raises(NotFoundError):
            store.get(session.id)
