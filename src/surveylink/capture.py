"""
Response capture for one fill session.

ResponseCapture owns the single mutable SurveyResponse of a session. All
mutations are synchronous and take effect immediately. Once `finalize()`
has been called the response is frozen and further edits raise.
"""

import copy
from typing import Callable, Dict, List, Mapping, Optional, Set

from surveylink.model import (
    AnswerKind,
    Question,
    QuestionType,
    Row,
    Survey,
    SurveyResponse,
    answer_for,
    ensure_exhaustive,
    normalize_rows,
)


class CaptureError(Exception):
    """Raised on an edit that does not fit the question or the capture state."""
    pass


def _text_missing(question: Question, value) -> bool:
    return not value


def _choices_missing(question: Question, value) -> bool:
    return not value


def _table_missing(question: Question, value) -> bool:
    # Only the first row is checked; later rows may be left partly empty.
    first = normalize_rows(value)[0]
    return any(not first.get(column) for column in question.columns)


_MISSING_CHECKS: Dict[QuestionType, Callable[[Question, object], bool]] = {
    QuestionType.SHORT_ANSWER: _text_missing,
    QuestionType.PARAGRAPH: _text_missing,
    QuestionType.MULTIPLE_CHOICE: _text_missing,
    QuestionType.CHECKBOXES: _choices_missing,
    QuestionType.DROPDOWN: _text_missing,
    QuestionType.DYNAMIC_TABLE: _table_missing,
}
ensure_exhaustive(_MISSING_CHECKS, "_MISSING_CHECKS")


class ResponseCapture:
    """
    Accumulates one response to a survey.

    The survey is copied on construction, so edits the author makes to the
    original object afterwards do not affect an in-progress fill.

    Usage:
        capture = ResponseCapture(survey)
        capture.set_value(q_name, "Ada")
        capture.toggle_option(q_colors, "Red", True)
        failing = capture.validate_for_submit()
        if not failing:
            response = capture.finalize()
    """

    def __init__(self, survey: Survey, response: Optional[Mapping] = None):
        self.survey = copy.deepcopy(survey)
        self._response: SurveyResponse = copy.deepcopy(dict(response or {}))
        self._finalized = False

    @property
    def response(self) -> SurveyResponse:
        """A copy of the answers captured so far."""
        return copy.deepcopy(self._response)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _check_open(self) -> None:
        if self._finalized:
            raise CaptureError("response has already been submitted")

    def _question(self, question_id: str, kind: Optional[AnswerKind] = None) -> Question:
        question = self.survey.get_question(question_id)
        if question is None:
            raise CaptureError(f"unknown question id '{question_id}'")
        if kind is not None and question.answer_kind is not kind:
            raise CaptureError(
                f"question '{question_id}' is {question.question_type.value}, "
                f"not a {kind.value} question"
            )
        return question

    def value(self, question_id: str):
        """Current answer for a question, or None if absent or mismatched."""
        question = self.survey.get_question(question_id)
        if question is None:
            return None
        return copy.deepcopy(answer_for(question, self._response))

    def set_value(self, question_id: str, value: str) -> None:
        """Overwrite a single-string answer."""
        self._check_open()
        self._question(question_id, AnswerKind.TEXT)
        self._response[question_id] = value

    def selected(self, question_id: str) -> List[str]:
        question = self._question(question_id, AnswerKind.CHOICES)
        return list(answer_for(question, self._response) or [])

    def toggle_option(self, question_id: str, option: str, included: bool) -> None:
        """
        Include or exclude one checkbox option.

        Included options keep their selection order. Repeating the same
        call is a no-op.
        """
        self._check_open()
        current = self.selected(question_id)
        if included and option not in current:
            current.append(option)
        elif not included and option in current:
            current.remove(option)
        self._response[question_id] = current

    def rows(self, question_id: str) -> List[Row]:
        """Table rows as displayed: never fewer than one."""
        question = self._question(question_id, AnswerKind.TABLE)
        return [dict(r) for r in normalize_rows(answer_for(question, self._response))]

    def add_row(self, question_id: str) -> None:
        self._check_open()
        rows = self.rows(question_id)
        rows.append({})
        self._response[question_id] = rows

    def remove_row(self, question_id: str, index: int) -> None:
        """
        Remove a table row.

        The last remaining row is replaced by an empty row instead of being
        deleted.
        """
        self._check_open()
        rows = self.rows(question_id)
        if not 0 <= index < len(rows):
            raise IndexError(f"row {index} out of range")
        if len(rows) > 1:
            del rows[index]
        else:
            rows = [{}]
        self._response[question_id] = rows

    def set_cell(self, question_id: str, index: int, column: str, value: str) -> None:
        self._check_open()
        rows = self.rows(question_id)
        if not 0 <= index < len(rows):
            raise IndexError(f"row {index} out of range")
        rows[index][column] = value
        self._response[question_id] = rows

    def validate_for_submit(self) -> Set[str]:
        """
        Check required questions.

        Returns:
            Set of question ids that block submission (empty = submittable)
        """
        failing = set()
        for question in self.survey.questions:
            if not question.is_required:
                continue
            value = answer_for(question, self._response)
            if _MISSING_CHECKS[question.question_type](question, value):
                failing.add(question.id)
        return failing

    def finalize(self) -> SurveyResponse:
        """Freeze the response and return it."""
        self._finalized = True
        return copy.deepcopy(self._response)
