"""
Default survey shown when an authoring session starts without a link.

Builds an enterprise environmental-information questionnaire. Each call
returns a new Survey with freshly generated question ids.
"""
from surveylink.model import Question, QuestionType, Survey, new_question_id


def _short(title: str) -> Question:
    return Question(
        id=new_question_id(),
        title=title,
        question_type=QuestionType.SHORT_ANSWER,
        is_required=True,
    )


def _choice(title: str, options) -> Question:
    return Question(
        id=new_question_id(),
        title=title,
        question_type=QuestionType.MULTIPLE_CHOICE,
        options=list(options),
        is_required=True,
    )


def build_default_survey() -> Survey:
    survey = Survey(
        title="ENVIRONMENTAL INFORMATION SURVEY FORM",
        description="WE ONLY USE THIS INFORMATION FOR SCIENTIFIC RESEARCH PURPOSES.",
    )
    survey.questions = [
        _short("Company name"),
        _short("Address"),
        _short("Main line of production (e.g. electronics, garments...)"),
        _choice(
            "Charter capital",
            [
                "Under 3 billion VND",
                "3 to under 20 billion VND",
                "20 to under 100 billion VND",
                "Over 100 billion VND",
            ],
        ),
        _short("Workforce size (people)"),
        _short("Factory floor area (m²)"),
        _choice(
            "Type of enterprise",
            [
                "State-owned enterprise",
                "Foreign-invested enterprise",
                "Domestic private enterprise",
            ],
        ),
    ]
    return survey
