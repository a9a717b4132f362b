"""Request and response bodies for the HTTP API."""

from pydantic import Field

from mindmate.models.quiz import Answer, Question, QuestionType, QuizHistoryEntry
from mindmate.models.study import CamelModel, ChatTurn, Flashcard, SummaryResult


class TextIn(CamelModel):
    text: str | None = None


class AdvancedQuizIn(TextIn):
    question_types: list[QuestionType] | None = None


class QueryIn(CamelModel):
    query: str | None = None


class AbstractIn(CamelModel):
    abstract: str | None = None


class TutorChatIn(CamelModel):
    message: str | None = None
    context: str | None = None
    conversation_history: list[ChatTurn] = Field(default_factory=list)


class QuestionsOut(CamelModel):
    questions: list[Question]


class FlashcardsOut(CamelModel):
    flashcards: list[Flashcard]


class PaperSummaryOut(CamelModel):
    ai_summary: str


class StudyPackExportIn(CamelModel):
    title: str = "MindMate Study Pack"
    summary: SummaryResult | None = None
    # None means "use the flashcards saved for this client"
    flashcards: list[Flashcard] | None = None
    include_history: bool = True


class QuizExportIn(CamelModel):
    title: str = "MindMate Quiz"
    questions: list[Question] = Field(..., min_length=1)
    include_answers: bool = False


class TransitionIn(CamelModel):
    """Optional position the client was looking at when it sent the event."""

    position: int | None = None


class SelectAnswerIn(TransitionIn):
    answer: Answer | None = None


class HistoryOut(CamelModel):
    items: list[QuizHistoryEntry]
