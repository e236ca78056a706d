"""
CSV export of collected responses.

Format:
    - Header row: question titles in survey order, joined with ',' and
      NOT escaped (kept for compatibility with existing exports)
    - One row per response, cells aligned to the same question order
    - Every row, header included, ends with '\\n'

Cell encoding by answer kind:
    absent        -> empty cell
    text  s       -> "s" with every " doubled
    choices       -> "a, b, c" (values are not quote-escaped)
    table rows    -> "<compact JSON of the rows>" with every " doubled
"""

import json
import re
import warnings
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from surveylink.model import (
    AnswerValue,
    Question,
    QuestionType,
    Survey,
    answer_for,
    ensure_exhaustive,
)

CSV_MIME_TYPE = "text/csv"
DEFAULT_EXPORT_NAME = "survey_responses"

_WHITESPACE_RE = re.compile(r"\s")
_UNSAFE_HEADER_CHARS = (",", '"', "\n", "\r")


def _quote(text: str) -> str:
    return f'"{text}"'


def _text_cell(value: str) -> str:
    if not value:
        return ""
    return _quote(value.replace('"', '""'))


def _choices_cell(value: List[str]) -> str:
    return _quote(", ".join(value))


def _table_cell(value: List[Dict[str, str]]) -> str:
    encoded = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return _quote(encoded.replace('"', '""'))


_CELL_ENCODERS: Dict[QuestionType, Callable[[AnswerValue], str]] = {
    QuestionType.SHORT_ANSWER: _text_cell,
    QuestionType.PARAGRAPH: _text_cell,
    QuestionType.MULTIPLE_CHOICE: _text_cell,
    QuestionType.CHECKBOXES: _choices_cell,
    QuestionType.DROPDOWN: _text_cell,
    QuestionType.DYNAMIC_TABLE: _table_cell,
}
ensure_exhaustive(_CELL_ENCODERS, "_CELL_ENCODERS")


def csv_cell(question: Question, response: Mapping) -> str:
    """Encode the answer to `question` as one CSV cell."""
    value = answer_for(question, response)
    if value is None:
        return ""
    return _CELL_ENCODERS[question.question_type](value)


def csv_header(survey: Survey) -> str:
    titles = [q.title for q in survey.questions]
    for title in titles:
        if any(c in title for c in _UNSAFE_HEADER_CHARS):
            warnings.warn(
                f"Question title {title!r} is written to the CSV header unescaped",
                UserWarning,
            )
    return ",".join(titles)


def export_csv(survey: Survey, responses: Iterable[Mapping]) -> str:
    """
    Render responses to `survey` as CSV text.

    Args:
        survey: Survey whose questions define the columns
        responses: Finalized responses, in the order they were collected

    Returns:
        CSV text with a header line and one line per response
    """
    lines = [csv_header(survey)]
    for response in responses:
        lines.append(",".join(csv_cell(q, response) for q in survey.questions))
    return "".join(line + "\n" for line in lines)


def export_filename(survey: Survey, extension: str = ".csv") -> str:
    """Survey title with each whitespace character replaced by '_'."""
    stem = _WHITESPACE_RE.sub("_", survey.title) or DEFAULT_EXPORT_NAME
    return stem + extension


def write_csv(path: str, survey: Survey, responses: Iterable[Mapping]) -> str:
    """Write the export to `path` and return the path."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(export_csv(survey, responses))
    return path


def _summarize_text(question: Question, value: str) -> str:
    return value


def _summarize_choices(question: Question, value: List[str]) -> str:
    return ", ".join(value)


def _summarize_table(question: Question, value: List[Dict[str, str]]) -> str:
    lines = []
    for index, row in enumerate(value, start=1):
        cells = "; ".join(f"{key}: {cell}" for key, cell in row.items())
        lines.append(f"Row {index}: {cells}")
    return "\n".join(lines)


_SUMMARIZERS: Dict[QuestionType, Callable[[Question, AnswerValue], str]] = {
    QuestionType.SHORT_ANSWER: _summarize_text,
    QuestionType.PARAGRAPH: _summarize_text,
    QuestionType.MULTIPLE_CHOICE: _summarize_text,
    QuestionType.CHECKBOXES: _summarize_choices,
    QuestionType.DROPDOWN: _summarize_text,
    QuestionType.DYNAMIC_TABLE: _summarize_table,
}
ensure_exhaustive(_SUMMARIZERS, "_SUMMARIZERS")


def summarize_answer(question: Question, response: Mapping) -> str:
    """Human-readable rendering of one answer, for response listings."""
    value: Optional[AnswerValue] = answer_for(question, response)
    if value is None:
        return ""
    return _SUMMARIZERS[question.question_type](question, value)
