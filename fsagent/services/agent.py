"""Agent loop driving completions and tool execution for one user turn."""

from fsagent.clients import CompletionClient
from fsagent.models.conversation import Conversation
from fsagent.models.llm import LLMUsage, ToolCall, ToolExecution, TurnResult
from fsagent.services.parser import parse_tool_call
from fsagent.tools.registry import ToolsRegistry
from fsagent.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_TOOL_STEPS = 25


class TurnObserver:
    """Receives progress notifications while a turn runs.

    The default implementation ignores everything; front ends override the
    hooks they want to display.
    """

    def on_thinking(self) -> None:
        """A completion request is about to be sent."""

    def on_thinking_done(self) -> None:
        """The completion request returned."""

    def on_narration(self, text: str) -> None:
        """The model explained what it is about to do."""

    def on_tool_call(self, call: ToolCall) -> None:
        """The model asked for a tool."""

    def on_tool_result(self, execution: ToolExecution) -> None:
        """A tool finished (or failed) and its output goes back to the model."""

    def on_invalid_tool_call(self, error: str) -> None:
        """The model wrote a tool-call block that could not be parsed."""

    def on_reply(self, text: str) -> None:
        """The model produced a plain reply and the turn is over."""

    def on_step_limit(self, max_steps: int) -> None:
        """The turn stopped because the tool step limit was reached."""


class AgentService:
    """Runs the tool-calling loop for a conversation."""

    def __init__(
        self,
        client: CompletionClient,
        registry: ToolsRegistry,
        max_tool_steps: int = DEFAULT_MAX_TOOL_STEPS,
        context_warning_tokens: int | None = None,
    ):
        """Initialize the agent.

        Args:
            client: Completion client for the configured provider
            registry: Tools the model may call
            max_tool_steps: Maximum tool executions within a single user turn
            context_warning_tokens: Transcript size that triggers a warning, None to disable
        """
        if max_tool_steps < 1:
            raise ValueError("max_tool_steps must be at least 1")
        self.client = client
        self.registry = registry
        self.max_tool_steps = max_tool_steps
        self.context_warning_tokens = context_warning_tokens

    async def run_turn(
        self,
        conversation: Conversation,
        user_input: str,
        observer: TurnObserver | None = None,
        **kwargs,
    ) -> TurnResult:
        """Run one user turn until the model replies without a tool call.

        Args:
            conversation: Transcript to extend; every message of the turn is appended to it
            user_input: What the user typed
            observer: Progress callbacks for display
            **kwargs: Extra parameters passed to the completion client

        Returns:
            The final reply with the tool executions performed along the way

        Raises:
            CompletionError: If the completion endpoint fails
        """
        observer = observer or TurnObserver()
        conversation.add_user(user_input)

        steps: list[ToolExecution] = []
        usage = LLMUsage()
        turns = 0

        logger.info(f"Starting turn with {len(conversation)} messages, max_tool_steps: {self.max_tool_steps}")

        while True:
            turns += 1
            self._check_context_size(conversation)

            observer.on_thinking()
            try:
                response = await self.client.create_message(conversation.messages, **kwargs)
            finally:
                observer.on_thinking_done()
            usage.add(response.usage)

            reply = response.content
            parsed = parse_tool_call(reply)

            if not parsed.wants_tool:
                conversation.add_assistant(reply)
                observer.on_reply(reply)
                logger.info(f"Turn completed in {turns} completions with {len(steps)} tool steps")
                return TurnResult(reply=reply, stop_reason="end_turn", steps=steps, turns=turns, usage=usage)

            conversation.add_assistant(reply)
            if parsed.narration:
                observer.on_narration(parsed.narration)

            if len(steps) >= self.max_tool_steps:
                logger.warning(f"Tool step limit reached ({self.max_tool_steps}), ending turn")
                observer.on_step_limit(self.max_tool_steps)
                return TurnResult(
                    reply=parsed.narration, stop_reason="max_steps", steps=steps, turns=turns, usage=usage
                )

            if parsed.call is None:
                logger.warning(f"Model wrote an invalid tool call: {parsed.error}")
                observer.on_invalid_tool_call(parsed.error)
                execution = ToolExecution(
                    name="", input={}, output=f"❌ Invalid tool call: {parsed.error}", is_error=True
                )
            else:
                observer.on_tool_call(parsed.call)
                execution = await self.registry.execute(parsed.call.name, parsed.call.input)
                observer.on_tool_result(execution)

            steps.append(execution)
            conversation.add_tool_result(execution.output)

    def _check_context_size(self, conversation: Conversation) -> None:
        if self.context_warning_tokens and conversation.token_estimate > self.context_warning_tokens:
            logger.warning(
                f"Transcript is ~{conversation.token_estimate} tokens, above the "
                f"{self.context_warning_tokens} token warning threshold"
            )
