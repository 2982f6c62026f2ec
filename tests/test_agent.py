"""Tests for the agent loop."""

import json
from unittest.mock import AsyncMock, Mock

import pytest

from fsagent.exceptions import CompletionError
from fsagent.models.conversation import Conversation
from fsagent.services.agent import AgentService, TurnObserver
from fsagent.services.prompts import get_system_prompt


def tool_block(name: str, tool_input: dict) -> str:
    return f"<tool_call>\n{json.dumps({'name': name, 'input': tool_input})}\n</tool_call>"


@pytest.fixture
def conversation(registry):
    return Conversation(system_prompt=get_system_prompt(registry))


class TestPlainTurns:
    """Turns where the model answers without tools."""

    @pytest.mark.asyncio
    async def test_plain_reply_ends_turn(self, registry, conversation, scripted_client):
        """Test that a reply without a block is returned and appended."""
        client = scripted_client(["Hi! What can I do for you?"])
        agent = AgentService(client, registry)

        result = await agent.run_turn(conversation, "hello")

        assert result.reply == "Hi! What can I do for you?"
        assert result.stop_reason == "end_turn"
        assert result.steps == []
        assert result.turns == 1
        assert [m.role for m in conversation.messages] == ["system", "user", "assistant"]
        assert conversation.messages[-1].content == "Hi! What can I do for you?"

    @pytest.mark.asyncio
    async def test_full_transcript_sent_every_request(self, registry, conversation, scripted_client):
        """Test that each completion request carries the whole transcript so far."""
        client = scripted_client(["first answer", "second answer"])
        agent = AgentService(client, registry)

        await agent.run_turn(conversation, "question one")
        await agent.run_turn(conversation, "question two")

        assert [m.content for m in client.requests[1][1:]] == ["question one", "first answer", "question two"]
        assert client.requests[1][0].role == "system"

    @pytest.mark.asyncio
    async def test_usage_accumulated(self, registry, conversation, scripted_client):
        """Test that token usage is summed across completions."""
        client = scripted_client([tool_block("list_files", {}), "done"])
        agent = AgentService(client, registry)

        result = await agent.run_turn(conversation, "list")

        assert result.usage.total_tokens == 30
        assert result.turns == 2


class TestToolTurns:
    """Turns where the model calls tools."""

    @pytest.mark.asyncio
    async def test_create_file_scenario(self, registry, conversation, scripted_client, workdir):
        """Test the create-a-file round trip from request to final reply."""
        client = scripted_client(
            [
                "I'll create that file for you.\n"
                + tool_block("edit_file", {"path": "notes.txt", "old_str": "", "new_str": "hello"}),
                "Created notes.txt containing 'hello'.",
            ]
        )
        agent = AgentService(client, registry)

        result = await agent.run_turn(conversation, "create a file named notes.txt with content hello")

        assert (workdir / "notes.txt").read_text(encoding="utf-8") == "hello"
        assert result.reply == "Created notes.txt containing 'hello'."
        assert result.stop_reason == "end_turn"
        assert len(result.steps) == 1
        assert result.steps[0].output == "✅ Created new file at notes.txt"

        roles = [m.role for m in conversation.messages]
        assert roles == ["system", "user", "assistant", "user", "assistant"]
        assert conversation.messages[3].content == "Tool result:\n✅ Created new file at notes.txt"
        assert conversation.messages[2].content.startswith("I'll create that file for you.")
        assert client.requests[1][-1].content == "Tool result:\n✅ Created new file at notes.txt"

    @pytest.mark.asyncio
    async def test_delete_missing_file_scenario(self, registry, conversation, scripted_client):
        """Test that deleting a missing file reports success back to the model."""
        client = scripted_client([tool_block("delete_file", {"path": "ghost.txt"}), "It's gone."])
        agent = AgentService(client, registry)

        result = await agent.run_turn(conversation, "delete ghost.txt")

        assert result.steps[0].output == "Successfully deleted: ghost.txt"
        assert result.steps[0].is_error is False
        assert conversation.messages[-2].content == "Tool result:\nSuccessfully deleted: ghost.txt"

    @pytest.mark.asyncio
    async def test_multiple_tool_calls_chain(self, registry, conversation, scripted_client, workdir):
        """Test that the loop keeps going while the model keeps calling tools."""
        (workdir / "a.txt").write_text("alpha", encoding="utf-8")
        client = scripted_client(
            [
                tool_block("list_files", {}),
                tool_block("read_file", {"path": "a.txt"}),
                tool_block("edit_file", {"path": "a.txt", "old_str": "alpha", "new_str": "beta"}),
                "Updated a.txt.",
            ]
        )
        agent = AgentService(client, registry)

        result = await agent.run_turn(conversation, "change alpha to beta")

        assert [step.name for step in result.steps] == ["list_files", "read_file", "edit_file"]
        assert result.steps[1].output == "alpha"
        assert (workdir / "a.txt").read_text(encoding="utf-8") == "beta"
        assert result.turns == 4

    @pytest.mark.asyncio
    async def test_unknown_tool_fed_back_to_model(self, registry, conversation, scripted_client):
        """Test that an unknown tool name does not break the loop."""
        client = scripted_client([tool_block("run_shell", {"cmd": "ls"}), "Sorry, I can't do that."])
        agent = AgentService(client, registry)

        result = await agent.run_turn(conversation, "run ls")

        assert result.stop_reason == "end_turn"
        assert conversation.messages[-2].content == "Tool result:\n❌ Unknown tool: run_shell"

    @pytest.mark.asyncio
    async def test_malformed_call_fed_back_to_model(self, registry, conversation, scripted_client):
        """Test that a broken tool-call block is reported so the model can retry."""
        client = scripted_client(
            [
                "<tool_call>{not json}</tool_call>",
                tool_block("list_files", {}),
                "Here are your files.",
            ]
        )
        agent = AgentService(client, registry)

        result = await agent.run_turn(conversation, "list files")

        assert result.stop_reason == "end_turn"
        assert result.steps[0].is_error is True
        feedback = conversation.messages[3].content
        assert feedback.startswith("Tool result:\n❌ Invalid tool call: tool call is not valid JSON")
        assert result.steps[1].name == "list_files"


class TestStepLimit:
    """The per-turn tool step limit."""

    @pytest.mark.asyncio
    async def test_step_limit_stops_runaway_loop(self, registry, conversation, scripted_client):
        """Test that a model that never stops calling tools is cut off."""
        client = scripted_client([tool_block("list_files", {})] * 5)
        agent = AgentService(client, registry, max_tool_steps=3)

        result = await agent.run_turn(conversation, "loop forever")

        assert result.stop_reason == "max_steps"
        assert len(result.steps) == 3
        assert result.turns == 4
        assert len(client.replies) == 1
        assert conversation.messages[-1].role == "assistant"

    @pytest.mark.asyncio
    async def test_conversation_continues_after_step_limit(self, registry, conversation, scripted_client):
        """Test that the next user turn works after the limit was hit."""
        client = scripted_client([tool_block("list_files", {}), tool_block("list_files", {}), "Finished."])
        agent = AgentService(client, registry, max_tool_steps=1)

        first = await agent.run_turn(conversation, "go")
        second = await agent.run_turn(conversation, "continue")

        assert first.stop_reason == "max_steps"
        assert second.reply == "Finished."
        roles = [m.role for m in conversation.messages]
        assert roles == ["system", "user", "assistant", "user", "assistant", "user", "assistant"]

    def test_step_limit_must_be_positive(self, registry, scripted_client):
        with pytest.raises(ValueError, match="max_tool_steps"):
            AgentService(scripted_client([]), registry, max_tool_steps=0)


class TestObserverAndErrors:
    """Observer notifications and endpoint failures."""

    @pytest.mark.asyncio
    async def test_observer_notified_in_order(self, registry, conversation, scripted_client):
        """Test that display hooks fire for narration, tool call, result and reply."""
        client = scripted_client(["Checking.\n" + tool_block("list_files", {}), "All done."])
        agent = AgentService(client, registry)
        observer = Mock(spec=TurnObserver)

        await agent.run_turn(conversation, "what's here?", observer=observer)

        called = [name for name, _, _ in observer.mock_calls]
        assert called == [
            "on_thinking",
            "on_thinking_done",
            "on_narration",
            "on_tool_call",
            "on_tool_result",
            "on_thinking",
            "on_thinking_done",
            "on_reply",
        ]
        observer.on_narration.assert_called_once_with("Checking.")
        observer.on_reply.assert_called_once_with("All done.")

    @pytest.mark.asyncio
    async def test_step_limit_notifies_observer(self, registry, conversation, scripted_client):
        client = scripted_client([tool_block("list_files", {})] * 2)
        agent = AgentService(client, registry, max_tool_steps=1)
        observer = Mock(spec=TurnObserver)

        await agent.run_turn(conversation, "go", observer=observer)

        observer.on_step_limit.assert_called_once_with(1)

    @pytest.mark.asyncio
    async def test_completion_error_propagates(self, registry, conversation):
        """Test that endpoint failures are not swallowed by the loop."""
        client = Mock()
        client.create_message = AsyncMock(side_effect=CompletionError("groq", "401 Unauthorized"))
        agent = AgentService(client, registry)
        observer = Mock(spec=TurnObserver)

        with pytest.raises(CompletionError, match="groq API error: 401 Unauthorized"):
            await agent.run_turn(conversation, "hello", observer=observer)

        observer.on_thinking_done.assert_called_once()
        assert conversation.messages[-1].content == "hello"

    @pytest.mark.asyncio
    async def test_context_warning_logged(self, registry, scripted_client, caplog):
        """Test that a large transcript triggers a warning but nothing is dropped."""
        conversation = Conversation(system_prompt="x" * 400)
        client = scripted_client(["ok"])
        agent = AgentService(client, registry, context_warning_tokens=50)

        with caplog.at_level("WARNING", logger="fsagent.services.agent"):
            await agent.run_turn(conversation, "hi")

        assert "token warning threshold" in caplog.text
        assert len(conversation) == 3


class TestSystemPrompt:
    """The generated system prompt."""

    def test_documents_every_tool(self, registry):
        prompt = get_system_prompt(registry)

        for name in registry.get_tool_names():
            assert name in prompt
        assert "<tool_call>" in prompt
        assert "</tool_call>" in prompt
        assert '"old_str"' in prompt
