"""
Serialization helpers for surveylink objects (Survey, Question, responses).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
Field names follow the wire format shared with share links and remote
submissions (`questionType`, `isRequired`, ...), so the dict produced here
is exactly what travels over the network.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from surveylink.model import (
    Question,
    QuestionType,
    Survey,
    SurveyResponse,
)


class SurveySchemaError(Exception):
    """Raised when a dict does not have the shape of a Survey."""
    pass


def _require(d: Dict[str, Any], key: str, kind: type, where: str) -> Any:
    if key not in d:
        raise SurveySchemaError(f"{where}: missing '{key}'")
    value = d[key]
    if not isinstance(value, kind):
        raise SurveySchemaError(f"{where}: '{key}' must be {kind.__name__}")
    return value


def _string_list(d: Dict[str, Any], key: str, where: str) -> List[str]:
    value = d.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SurveySchemaError(f"{where}: '{key}' must be a list of strings")
    return list(value)


def question_to_dict(q: Question) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": q.id,
        "title": q.title,
        "questionType": q.question_type.value,
        "options": list(q.options),
        "columns": list(q.columns),
        "isRequired": q.is_required,
    }
    if q.description is not None:
        d["description"] = q.description
    return d


def question_from_dict(d: Any, index: int = 0) -> Question:
    where = f"questions[{index}]"
    if not isinstance(d, dict):
        raise SurveySchemaError(f"{where}: must be an object")
    qid = _require(d, "id", str, where)
    raw_type = _require(d, "questionType", str, where)
    try:
        question_type = QuestionType(raw_type)
    except ValueError:
        raise SurveySchemaError(f"{where}: unknown questionType '{raw_type}'")

    title = d.get("title", "")
    if not isinstance(title, str):
        raise SurveySchemaError(f"{where}: 'title' must be str")
    description = d.get("description")
    if description is not None and not isinstance(description, str):
        raise SurveySchemaError(f"{where}: 'description' must be str")
    is_required = d.get("isRequired", False)
    if is_required is None:
        is_required = False
    if not isinstance(is_required, bool):
        raise SurveySchemaError(f"{where}: 'isRequired' must be bool")

    return Question(
        id=qid,
        title=title,
        question_type=question_type,
        description=description,
        options=_string_list(d, "options", where),
        columns=_string_list(d, "columns", where),
        is_required=is_required,
    )


def survey_to_dict(s: Survey) -> Dict[str, Any]:
    return {
        "title": s.title,
        "description": s.description,
        "questions": [question_to_dict(q) for q in s.questions],
    }


def survey_from_dict(d: Any) -> Survey:
    """
    Build a Survey from its dict form, validating the minimal shape.

    Requires a string `title`, a string `description` and a `questions`
    list whose items each carry a string `id` and a known `questionType`.
    Question ids must be unique.

    Raises:
        SurveySchemaError: If the shape is violated
    """
    if not isinstance(d, dict):
        raise SurveySchemaError("survey must be an object")
    title = _require(d, "title", str, "survey")
    description = _require(d, "description", str, "survey")
    raw_questions = _require(d, "questions", list, "survey")

    questions = [question_from_dict(q, i) for i, q in enumerate(raw_questions)]

    seen = set()
    for q in questions:
        if q.id in seen:
            raise SurveySchemaError(f"duplicate question id '{q.id}'")
        seen.add(q.id)

    return Survey(title=title, description=description, questions=questions)


def survey_to_json(s: Survey) -> str:
    """Canonical JSON text: compact, key order fixed, non-ASCII kept as-is."""
    return json.dumps(survey_to_dict(s), ensure_ascii=False, separators=(",", ":"))


def survey_from_json(s: str) -> Survey:
    d = json.loads(s)
    return survey_from_dict(d)


def survey_to_yaml(s: Survey) -> str:
    return yaml.safe_dump(survey_to_dict(s), allow_unicode=True, sort_keys=False)


def survey_from_yaml(s: str) -> Survey:
    d = yaml.safe_load(s)
    return survey_from_dict(d)


def load_survey_file(path: str) -> Survey:
    """Read a survey from a .json, .yaml or .yml file."""
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    if path.endswith((".yaml", ".yml")):
        return survey_from_yaml(content)
    return survey_from_json(content)


def response_to_json(response: SurveyResponse) -> str:
    return json.dumps(response, ensure_ascii=False, separators=(",", ":"))


def responses_from_json(s: str) -> List[SurveyResponse]:
    """
    Parse a JSON array of response mappings.

    Values are kept as stored; consumers discard mismatched shapes.
    """
    data = json.loads(s)
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise SurveySchemaError("responses must be a list of objects")
    return data
