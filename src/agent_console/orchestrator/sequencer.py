"""Phase sequencer: the response processing state machine.

Drives a run through its phases in fixed order:

    THINKING -> ANALYZING_TOOLS -> [EXECUTING_TOOL -> PROCESSING_RESULTS]
             -> GENERATING_RESPONSE

The bracketed branch runs only when the classifier finds at least one
category. The terminal phase (COMPLETED or FAILED) is set at finalization.
Each phase writes through the step tracker and then waits its configured
delay; the run is suspended only at those delay points.

Tool execution is simulated: the request and result payloads are synthetic.
A real execution path would add a FAILED transition out of EXECUTING_TOOL
and PROCESSING_RESULTS.
"""

from collections.abc import Awaitable, Callable

from agent_console.config import ProcessingTimings
from agent_console.orchestrator import classifier, payloads
from agent_console.orchestrator.runs import RunRegistry
from agent_console.orchestrator.steps import StepTracker
from agent_console.orchestrator.types import (
    Category,
    Phase,
    RunContext,
    SequenceResult,
    ToolInfo,
)
from agent_console.telemetry import (
    REQUEST_CLASSIFIED,
    TOOL_BRANCH_SELECTED,
    TOOL_BRANCH_SKIPPED,
    TOOL_CALL_COMPLETED,
    TOOL_CALL_STARTED,
    get_logger,
)

log = get_logger(__name__)

AVAILABLE_TOOLS = "Email integration, Web search, File operations"

PhaseStep = Callable[[RunContext, str, SequenceResult], Awaitable[Phase | None]]


class PhaseSequencer:
    """Runs the phase state machine for one run at a time."""

    def __init__(
        self,
        registry: RunRegistry,
        tracker: StepTracker,
        timings: ProcessingTimings,
    ) -> None:
        self.registry = registry
        self.tracker = tracker
        self.timings = timings
        self._steps: dict[Phase, PhaseStep] = {
            Phase.THINKING: self.step_thinking,
            Phase.ANALYZING_TOOLS: self.step_analyzing_tools,
            Phase.EXECUTING_TOOL: self.step_executing_tool,
            Phase.PROCESSING_RESULTS: self.step_processing_results,
            Phase.GENERATING_RESPONSE: self.step_generating_response,
        }

    async def run(self, ctx: RunContext, user_input: str) -> SequenceResult:
        """Drive ``ctx`` from THINKING through GENERATING_RESPONSE.

        Args:
            ctx: Active run context.
            user_input: Raw request text.

        Returns:
            SequenceResult describing the classification and the phases run.

        Raises:
            RunCancelledError: If the run is superseded or torn down while
                waiting between phases.
        """
        result = SequenceResult()
        state: Phase | None = Phase.THINKING
        while state is not None:
            result.phases.append(state)
            state = await self._steps[state](ctx, user_input, result)
        return result

    async def step_thinking(
        self, ctx: RunContext, user_input: str, result: SequenceResult
    ) -> Phase | None:
        self.tracker.begin_phase(ctx, Phase.THINKING)
        await self.registry.wait(ctx, self.timings.thinking, "thinking")
        self.tracker.attach_response(
            ctx,
            Phase.THINKING,
            f'User asked: "{user_input}"\n'
            "I need to understand what they're asking for and determine the best way to help "
            "them. Let me analyze this message and see if I need to use any tools or if I can "
            "respond directly.",
        )
        return Phase.ANALYZING_TOOLS

    async def step_analyzing_tools(
        self, ctx: RunContext, user_input: str, result: SequenceResult
    ) -> Phase | None:
        self.tracker.begin_phase(ctx, Phase.ANALYZING_TOOLS)
        await self.registry.wait(ctx, self.timings.analyzing_tools, "analyzing_tools")

        result.categories = classifier.categorize(user_input)
        result.primary = classifier.primary(result.categories)
        labels = ", ".join(c.label for c in result.categories)
        use_tools = bool(result.categories)
        log.info(
            REQUEST_CLASSIFIED,
            categories=[c.id for c in result.categories],
            primary=result.primary.id if result.primary else None,
            **ctx.log_fields(),
        )

        decision = f"Will use {labels} tools" if use_tools else "No tools needed for this request"
        self.tracker.attach_response(
            ctx,
            Phase.ANALYZING_TOOLS,
            "Checking available tools for this request...\n"
            f"Tool categories detected: {labels or 'None'}\n"
            f"Available tools: {AVAILABLE_TOOLS}\n"
            f"Decision: {decision}",
        )

        if result.primary is not None:
            log.info(TOOL_BRANCH_SELECTED, category=result.primary.id, **ctx.log_fields())
            return Phase.EXECUTING_TOOL
        log.info(TOOL_BRANCH_SKIPPED, **ctx.log_fields())
        return Phase.GENERATING_RESPONSE

    async def step_executing_tool(
        self, ctx: RunContext, user_input: str, result: SequenceResult
    ) -> Phase | None:
        category = result.primary
        provider = payloads.tool_provider(category)
        action = payloads.tool_action(category)
        tool_name = f"{provider}_action"

        self.tracker.begin_phase(
            ctx,
            Phase.EXECUTING_TOOL,
            ToolInfo(
                tool_name=tool_name,
                provider=provider,
                status="executing",
                start_time=self.tracker.clock(),
            ),
        )
        invocation = payloads.render_invocation(
            provider, action, payloads.build_request(category, user_input)
        )
        self.tracker.attach_tool_call(ctx, Phase.EXECUTING_TOOL, invocation)
        log.info(TOOL_CALL_STARTED, tool_name=tool_name, action=action, **ctx.log_fields())

        await self.registry.wait(ctx, self.timings.tool_execution, "tool_execution")

        tool_result = payloads.build_result(category, executed_at=self.tracker.clock())
        self.tracker.attach_tool_call(
            ctx, Phase.EXECUTING_TOOL, invocation, payloads.result_to_dict(tool_result)
        )
        result.tool_executed = True
        log.info(TOOL_CALL_COMPLETED, tool_name=tool_name, success=True, **ctx.log_fields())
        return Phase.PROCESSING_RESULTS

    async def step_processing_results(
        self, ctx: RunContext, user_input: str, result: SequenceResult
    ) -> Phase | None:
        self.tracker.begin_phase(
            ctx,
            Phase.PROCESSING_RESULTS,
            ToolInfo(status="completed", end_time=self.tracker.clock()),
        )
        self.tracker.attach_response(
            ctx,
            Phase.PROCESSING_RESULTS,
            "Tool execution completed successfully!\n"
            f"{payloads.success_message(result.primary)}\n"
            "Processing the result to formulate a response to the user.",
        )
        await self.registry.wait(ctx, self.timings.processing_results, "processing_results")
        return Phase.GENERATING_RESPONSE

    async def step_generating_response(
        self, ctx: RunContext, user_input: str, result: SequenceResult
    ) -> Phase | None:
        self.tracker.begin_phase(ctx, Phase.GENERATING_RESPONSE)
        self.tracker.attach_response(
            ctx,
            Phase.GENERATING_RESPONSE,
            "Generating final response based on:\n"
            f'- User\'s original request: "{user_input}"\n'
            f"- Tool results: {_tool_outcome(result.primary if result.tool_executed else None)}\n"
            "- Context: Friendly conversation\n\n"
            "Formulating helpful and conversational response...",
        )
        await self.registry.wait(ctx, self.timings.generating_response, "generating_response")
        return None


def _tool_outcome(category: Category | None) -> str:
    if category is None:
        return "No tools used"
    return f"{category.label} operation completed successfully"
