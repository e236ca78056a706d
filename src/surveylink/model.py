"""
Core Survey Model Objects

Defines the data structures shared by every other layer:
    - QuestionType (the closed set of question variants)
    - AnswerKind (the shape an answer takes for a variant)
    - Question
    - Survey (root container)

Responses are plain JSON-compatible mappings:

    SurveyResponse = {question_id: AnswerValue}

    AnswerValue is one of:
        str                     SHORT_ANSWER, PARAGRAPH, MULTIPLE_CHOICE, DROPDOWN
        List[str]               CHECKBOXES (selection order, no duplicates)
        List[Dict[str, str]]    DYNAMIC_TABLE (one dict per row)

    A missing key means "not yet answered".

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about links, CSV or HTTP
        - Represent structure, not behavior
        - Are fully serializable
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union


class QuestionType(Enum):
    """
    The six supported question variants.

    Values are the wire names used in the `questionType` field.
    """

    SHORT_ANSWER = "SHORT_ANSWER"
    PARAGRAPH = "PARAGRAPH"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    CHECKBOXES = "CHECKBOXES"
    DROPDOWN = "DROPDOWN"
    DYNAMIC_TABLE = "DYNAMIC_TABLE"


class AnswerKind(Enum):
    """Shape of the answer a question variant collects."""

    TEXT = "text"
    CHOICES = "choices"
    TABLE = "table"


Row = Dict[str, str]
AnswerValue = Union[str, List[str], List[Row]]
SurveyResponse = Dict[str, AnswerValue]


def ensure_exhaustive(table: Mapping[QuestionType, Any], name: str) -> None:
    """
    Fail loudly if a per-variant dispatch table misses a QuestionType.

    Every module that branches on the question variant builds a dict keyed
    by QuestionType and calls this at import time, so a new variant cannot
    be added without updating each consumer.

    Raises:
        TypeError: If any variant is missing from `table`
    """
    missing = [t.value for t in QuestionType if t not in table]
    if missing:
        raise TypeError(f"{name} does not handle question types: {missing}")


ANSWER_KINDS: Dict[QuestionType, AnswerKind] = {
    QuestionType.SHORT_ANSWER: AnswerKind.TEXT,
    QuestionType.PARAGRAPH: AnswerKind.TEXT,
    QuestionType.MULTIPLE_CHOICE: AnswerKind.TEXT,
    QuestionType.CHECKBOXES: AnswerKind.CHOICES,
    QuestionType.DROPDOWN: AnswerKind.TEXT,
    QuestionType.DYNAMIC_TABLE: AnswerKind.TABLE,
}
ensure_exhaustive(ANSWER_KINDS, "ANSWER_KINDS")

# Variants whose `options` list is meaningful.
CHOICE_TYPES = frozenset(
    {QuestionType.MULTIPLE_CHOICE, QuestionType.CHECKBOXES, QuestionType.DROPDOWN}
)


def new_question_id() -> str:
    """Generate a fresh, never-reused question identifier."""
    return str(uuid.uuid4())


@dataclass
class Question:
    """
    A single question in a survey.

    Properties:
        id:
            Opaque unique identifier, stable for the question's lifetime.
            Generated at creation and never reused.

        title:
            Question text (may be empty while editing)

        question_type:
            QuestionType variant

        description:
            Optional helper text shown under the title

        options:
            Ordered choices. Meaningful only for CHOICE_TYPES.
            Never empty once a choice variant is selected.

        columns:
            Ordered column names. Meaningful only for DYNAMIC_TABLE.
            Read-only at response time.

        is_required:
            Whether the question must be answered before submission
    """

    id: str
    title: str
    question_type: QuestionType
    description: Optional[str] = None
    options: List[str] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    is_required: bool = False

    @property
    def answer_kind(self) -> AnswerKind:
        return ANSWER_KINDS[self.question_type]

    @property
    def has_options(self) -> bool:
        return self.question_type in CHOICE_TYPES


@dataclass
class Survey:
    """
    Root container for an authored questionnaire.

    Properties:
        title: Survey title (also used to name CSV exports)
        description: Free text shown above the questions
        questions: Ordered questions; order = display and export order

    INVARIANTS:
        - Question ids are unique within a Survey
        - Choice-like questions have at least one option
    """

    title: str
    description: str = ""
    questions: List[Question] = field(default_factory=list)

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Args:
            question_id: Question identifier

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def question_ids(self) -> List[str]:
        return [q.id for q in self.questions]


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


def _is_choices(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _is_table(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(row, dict) and all(isinstance(v, str) for v in row.values())
        for row in value
    )


_SHAPE_CHECKS = {
    AnswerKind.TEXT: _is_text,
    AnswerKind.CHOICES: _is_choices,
    AnswerKind.TABLE: _is_table,
}


def answer_matches(question: Question, value: Any) -> bool:
    """Return True if `value` has the shape `question` collects."""
    return _SHAPE_CHECKS[question.answer_kind](value)


def answer_for(question: Question, response: Mapping[str, Any]) -> Optional[AnswerValue]:
    """
    Look up the answer to `question` in `response`.

    A stored value whose shape does not match the question's variant
    (for example a string stored against a DYNAMIC_TABLE question) is
    treated as absent.

    Returns:
        The stored value, or None if absent or mismatched
    """
    value = response.get(question.id)
    if value is None or not answer_matches(question, value):
        return None
    return value


def normalize_rows(value: Optional[List[Row]]) -> List[Row]:
    """A table answer is never empty: zero rows reads as one empty row."""
    if not value:
        return [{}]
    return value
