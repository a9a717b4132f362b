"""Tutor Agent - Answers student questions in a running conversation."""

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from mindmate.agents.llm import (
    ChatModelFactory,
    build_chat_model,
    invoke_model,
    require_text,
)
from mindmate.config.settings import Settings, get_settings
from mindmate.errors import UpstreamParseError
from mindmate.models.study import ChatTurn, TutorReply

SYSTEM_PROMPT = """You are an expert AI tutor helping students learn. Your role is to:
1. Answer questions clearly and accurately
2. Use the Socratic method to guide learning
3. Provide examples and analogies
4. Break down complex topics
5. Encourage critical thinking
6. Be patient and supportive

{context}

Keep responses concise but informative. Ask follow-up questions to check understanding."""

FAILURE_MESSAGE = "Failed to get tutor response. Please try again."


def build_tutor_messages(
    message: str,
    context: str | None = None,
    history: list[ChatTurn] | None = None,
) -> list[BaseMessage]:
    """
    Build the conversation sent to the model.

    Args:
        message: The student's new message
        context: Optional excerpt from the student's materials
        history: Prior turns, oldest first

    Returns:
        System instruction, replayed history, then the new message
    """
    context_block = (
        f"Context from student's materials:\n{context}" if context and context.strip() else ""
    )
    messages: list[BaseMessage] = [
        SystemMessage(content=SYSTEM_PROMPT.format(context=context_block))
    ]

    for turn in history or []:
        if turn.role == "assistant":
            messages.append(AIMessage(content=turn.content))
        else:
            messages.append(HumanMessage(content=turn.content))

    messages.append(HumanMessage(content=message))
    return messages


def tutor_reply(
    message: str,
    context: str | None = None,
    history: list[ChatTurn] | None = None,
    settings: Settings | None = None,
    make_llm: ChatModelFactory = build_chat_model,
) -> TutorReply:
    """
    Tutor Agent: Reply to a student message.

    Args:
        message: The student's new message
        context: Optional excerpt from the student's materials
        history: Prior turns, oldest first
        settings: Application settings (defaults to the cached settings)
        make_llm: Chat model factory

    Returns:
        TutorReply with the response text and a timestamp
    """
    require_text(message, field="Message")
    settings = settings or get_settings()

    llm = make_llm(
        settings,
        temperature=settings.default_temperature,
        max_tokens=settings.chat_max_tokens,
    )

    content = invoke_model(llm, build_tutor_messages(message, context, history), "tutor-chat")
    if not content:
        raise UpstreamParseError(FAILURE_MESSAGE)

    return TutorReply(response=content)
