"""Shared fixtures: a survey holding one question of every variant."""

import pytest

from surveylink.model import Question, QuestionType, Survey


def build_sample_survey() -> Survey:
    return Survey(
        title="Khảo sát môi trường 2024",
        description="Thông tin chỉ dùng cho nghiên cứu — 研究目的のみ",
        questions=[
            Question(
                id="q-name",
                title="Tên doanh nghiệp",
                question_type=QuestionType.SHORT_ANSWER,
                is_required=True,
            ),
            Question(
                id="q-notes",
                title="Notes",
                question_type=QuestionType.PARAGRAPH,
                description="Anything else?",
            ),
            Question(
                id="q-size",
                title="Size",
                question_type=QuestionType.MULTIPLE_CHOICE,
                options=["Small", "Medium", "Large"],
                is_required=True,
            ),
            Question(
                id="q-colors",
                title="Colors",
                question_type=QuestionType.CHECKBOXES,
                options=["Red", "Green", "Blue"],
            ),
            Question(
                id="q-region",
                title="Region",
                question_type=QuestionType.DROPDOWN,
                options=["North", "South"],
            ),
            Question(
                id="q-staff",
                title="Staff",
                question_type=QuestionType.DYNAMIC_TABLE,
                columns=["Name", "Role"],
                is_required=True,
            ),
        ],
    )


@pytest.fixture
def survey() -> Survey:
    return build_sample_survey()


@pytest.fixture
def complete_response() -> dict:
    return {
        "q-name": "Công ty ABC",
        "q-size": "Small",
        "q-colors": ["Red", "Blue"],
        "q-staff": [{"Name": "Ann", "Role": "Lead"}],
    }
