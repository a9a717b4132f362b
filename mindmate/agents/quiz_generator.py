"""Quiz Generator Agent - Writes quiz questions from study text."""

from mindmate.agents.llm import (
    ChatModelFactory,
    build_chat_model,
    generate_structured,
    require_text,
)
from mindmate.config.settings import Settings, get_settings
from mindmate.models.quiz import Question, QuestionList, QuestionType

QUIZ_PROMPT = """You are a helpful study assistant that creates multiple-choice quiz questions.
Generate exactly 10 multiple-choice questions from the provided text. Each question should:
- Test understanding of key concepts
- Have 4 answer options (A, B, C, D)
- Have exactly one correct answer
- Include an explanation for the correct answer

Return your response in the following JSON format:
{
  "questions": [
    {
      "question": "What is...",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctAnswer": 0,
      "explanation": "The correct answer is A because..."
    }
  ]
}

The correctAnswer should be the index (0-3) of the correct option in the options array."""

ADVANCED_QUIZ_PROMPT = """You are a helpful study assistant that creates diverse quiz questions.
Generate questions from the provided text with these types: {types}.

Create a mix of:
- Multiple choice (4 options, 1 correct)
- True/False questions
- Fill in the blank questions

Return your response in the following JSON format:
{{
  "questions": [
    {{
      "type": "multiple-choice",
      "question": "What is...",
      "options": ["A", "B", "C", "D"],
      "correctAnswer": 0,
      "explanation": "Explanation here"
    }},
    {{
      "type": "true-false",
      "question": "Statement here",
      "correctAnswer": true,
      "explanation": "Explanation here"
    }},
    {{
      "type": "fill-blank",
      "question": "The ___ is important because...",
      "correctAnswer": "answer",
      "explanation": "Explanation here"
    }}
  ]
}}

Generate at least 15 questions with a good mix of all types."""

FAILURE_MESSAGE = "Failed to generate quiz. Please try again."

DEFAULT_QUESTION_TYPES = [
    QuestionType.MULTIPLE_CHOICE,
    QuestionType.TRUE_FALSE,
    QuestionType.FILL_BLANK,
]


def generate_quiz(
    text: str,
    settings: Settings | None = None,
    make_llm: ChatModelFactory = build_chat_model,
) -> list[Question]:
    """
    Quiz Generator Agent: Generate ten multiple-choice questions.

    Args:
        text: Study material
        settings: Application settings (defaults to the cached settings)
        make_llm: Chat model factory

    Returns:
        List of questions (may be empty if the model produced none)
    """
    require_text(text)
    settings = settings or get_settings()

    reply = generate_structured(
        settings,
        make_llm,
        kind="quiz",
        system_prompt=QUIZ_PROMPT,
        user_content=text,
        schema=QuestionList,
        failure_message=FAILURE_MESSAGE,
        temperature=settings.default_temperature,
    )
    return reply.questions


def generate_advanced_quiz(
    text: str,
    question_types: list[QuestionType] | None = None,
    settings: Settings | None = None,
    make_llm: ChatModelFactory = build_chat_model,
) -> list[Question]:
    """
    Quiz Generator Agent: Generate a mix of question types.

    Args:
        text: Study material
        question_types: Types to ask for (all three when omitted)
        settings: Application settings (defaults to the cached settings)
        make_llm: Chat model factory

    Returns:
        List of questions of mixed types
    """
    require_text(text)
    settings = settings or get_settings()

    types = question_types or DEFAULT_QUESTION_TYPES
    system_prompt = ADVANCED_QUIZ_PROMPT.format(
        types=", ".join(t.value for t in types)
    )

    reply = generate_structured(
        settings,
        make_llm,
        kind="advanced-quiz",
        system_prompt=system_prompt,
        user_content=text,
        schema=QuestionList,
        failure_message=FAILURE_MESSAGE,
        temperature=settings.default_temperature,
    )
    return reply.questions
