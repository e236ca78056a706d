"""
Session state machine.

A session's top-level mode is decided once, when it starts:

    FILL    the start location carries a valid share link
    AUTHOR  anything else (no link, or a broken one)

AUTHOR sessions move freely between EDIT, PREVIEW and RESPONSES. They
share one Survey and one append-only, in-memory response collection.
Submitting a preview appends to that collection and switches to RESPONSES.

FILL sessions track submission of their single response:

    IDLE -> SUBMITTING -> SUCCESS    (terminal)
                       -> ERROR -> IDLE (retry, answers kept)

IDLE -> SUBMITTING only happens when no required question is missing.
SUBMITTING is left only when the remote call resolves.
"""

import logging
from enum import Enum
from typing import List, Mapping, Optional, Set, Tuple, Union

from surveylink.capture import ResponseCapture
from surveylink.endpoint_store import EndpointStore, MemoryEndpointStore
from surveylink.export import export_csv, export_filename
from surveylink.generator import GenerationError, SurveyGenerator
from surveylink.model import (
    CHOICE_TYPES,
    Question,
    QuestionType,
    Survey,
    SurveyResponse,
    new_question_id,
)
from surveylink.share_link import LinkDecodeError, decode_share_link, encode_share_link
from surveylink.submission import SubmissionClient, SubmissionTransportError
from surveylink.templates import build_default_survey

logger = logging.getLogger(__name__)

LINK_ERROR_MESSAGE = "Could not load the survey from the link. The link may be broken."
SUBMIT_ERROR_MESSAGE = "Something went wrong while sending. Please try again."
GENERATION_ERROR_MESSAGE = "An unknown error occurred."
OPTION_LABEL = "Option {}"


class SessionError(Exception):
    """Raised on an action the current session state does not allow."""
    pass


class SessionMode(Enum):
    AUTHOR = "author"
    FILL = "fill"


class AuthorView(Enum):
    EDIT = "EDIT"
    PREVIEW = "PREVIEW"
    RESPONSES = "RESPONSES"


class SubmissionStatus(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


_QUESTION_FIELDS = {"title", "description", "question_type", "options", "columns", "is_required"}


class AuthorSession:
    """
    Building, previewing and collecting responses locally.

    Properties:
        survey: The survey being authored
        view: Current AuthorView
        error: Message to show the author, or None
        endpoint_url: Endpoint used for share links (loaded from the store
            once, at construction)
        base_url: Location share links are built on
    """

    mode = SessionMode.AUTHOR

    def __init__(
        self,
        survey: Optional[Survey] = None,
        endpoint_store: Optional[EndpointStore] = None,
        base_url: str = "",
        generator: Optional[SurveyGenerator] = None,
        error: Optional[str] = None,
    ):
        self.survey = survey if survey is not None else build_default_survey()
        self.view = AuthorView.EDIT
        self.error = error
        self.base_url = base_url
        self.generator = generator
        self._store = endpoint_store or MemoryEndpointStore()
        self.endpoint_url = self._store.load() or ""
        self._responses: List[SurveyResponse] = []

    # ------------------------------------------------------------------
    # Views and local responses
    # ------------------------------------------------------------------

    @property
    def responses(self) -> Tuple[SurveyResponse, ...]:
        return tuple(self._responses)

    def select_view(self, view: Union[AuthorView, str]) -> None:
        self.view = AuthorView(view)

    def preview(self) -> ResponseCapture:
        """Switch to PREVIEW and start a capture over the current survey."""
        self.select_view(AuthorView.PREVIEW)
        return ResponseCapture(self.survey)

    def submit_preview(self, capture: ResponseCapture) -> Set[str]:
        """
        Keep a preview response locally.

        Returns:
            Failing question ids. If empty, the response was appended and
            the view is now RESPONSES.
        """
        if self.view is not AuthorView.PREVIEW:
            raise SessionError(f"cannot submit a preview from the {self.view.value} view")
        failing = capture.validate_for_submit()
        if failing:
            return failing
        self._responses.append(capture.finalize())
        self.view = AuthorView.RESPONSES
        logger.info("Stored local response #%d", len(self._responses))
        return set()

    def export_csv(self) -> str:
        return export_csv(self.survey, self._responses)

    def export_filename(self) -> str:
        return export_filename(self.survey)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def _get(self, question_id: str) -> Question:
        question = self.survey.get_question(question_id)
        if question is None:
            raise KeyError(question_id)
        return question

    def update_survey(self, title: Optional[str] = None, description: Optional[str] = None) -> None:
        if title is not None:
            self.survey.title = title
        if description is not None:
            self.survey.description = description

    def add_question(self) -> Question:
        question = Question(
            id=new_question_id(),
            title="",
            question_type=QuestionType.SHORT_ANSWER,
            description="",
        )
        self.survey.questions.append(question)
        return question

    def update_question(self, question_id: str, **changes) -> Question:
        """
        Apply a partial update to one question.

        Switching to a choice type seeds a first option if there is none;
        switching away from one clears the options.
        An empty option list for a choice question raises ValueError.
        """
        unknown = set(changes) - _QUESTION_FIELDS
        if unknown:
            raise TypeError(f"unknown question fields: {sorted(unknown)}")
        question = self._get(question_id)

        if "question_type" in changes:
            new_type = QuestionType(changes["question_type"])
            changes["question_type"] = new_type
            if new_type in CHOICE_TYPES:
                options = list(changes.get("options", question.options))
                changes["options"] = options or [OPTION_LABEL.format(1)]
            else:
                changes["options"] = []

        resulting_type = changes.get("question_type", question.question_type)
        if resulting_type in CHOICE_TYPES and "options" in changes and not changes["options"]:
            raise ValueError("a choice question keeps at least one option")

        for name, value in changes.items():
            setattr(question, name, value)
        return question

    def delete_question(self, question_id: str) -> None:
        self.survey.questions = [q for q in self.survey.questions if q.id != question_id]

    def _choice_question(self, question_id: str) -> Question:
        question = self._get(question_id)
        if not question.has_options:
            raise ValueError(f"question '{question_id}' has no options")
        return question

    def add_option(self, question_id: str) -> str:
        question = self._choice_question(question_id)
        label = OPTION_LABEL.format(len(question.options) + 1)
        question.options.append(label)
        return label

    def set_option(self, question_id: str, index: int, value: str) -> None:
        self._choice_question(question_id).options[index] = value

    def remove_option(self, question_id: str, index: int) -> None:
        question = self._choice_question(question_id)
        if len(question.options) <= 1:
            raise ValueError("a choice question keeps at least one option")
        del question.options[index]

    def generate(self, prompt: str, generator: Optional[SurveyGenerator] = None) -> bool:
        """
        Replace the survey with one produced from `prompt`.

        A blank prompt does nothing. On failure the survey is left as it
        was and `error` holds the message.

        Returns:
            True if the survey was replaced
        """
        if not prompt.strip():
            return False
        generator = generator or self.generator
        if generator is None:
            raise SessionError("no survey generator configured")

        self.error = None
        try:
            survey = generator.generate(prompt)
        except GenerationError as e:
            self.error = str(e) or GENERATION_ERROR_MESSAGE
            return False
        except Exception as e:
            logger.exception("Survey generator failed")
            self.error = str(e) or GENERATION_ERROR_MESSAGE
            return False
        self.survey = survey
        return True

    # ------------------------------------------------------------------
    # Sharing
    # ------------------------------------------------------------------

    def save_endpoint(self, url: Optional[str] = None) -> None:
        if url is not None:
            self.endpoint_url = url
        self._store.save(self.endpoint_url)

    def share_link(self) -> Optional[str]:
        """Link to the current survey, or None until an endpoint is set."""
        if not self.endpoint_url:
            return None
        return encode_share_link(self.survey, self.endpoint_url, self.base_url)


class FillSession:
    """
    Filling in a survey opened from a share link.

    The survey is a snapshot taken when the session starts; responses are
    delivered to `endpoint_url` through the SubmissionClient.
    """

    mode = SessionMode.FILL

    def __init__(self, survey: Survey, endpoint_url: str, client: Optional[SubmissionClient] = None):
        self.capture = ResponseCapture(survey)
        self.survey = self.capture.survey
        self.endpoint_url = endpoint_url
        self.status = SubmissionStatus.IDLE
        self.error: Optional[SubmissionTransportError] = None
        self._client = client or SubmissionClient()

    def _set_status(self, status: SubmissionStatus) -> None:
        logger.info("Submission status %s -> %s", self.status.value, status.value)
        self.status = status

    @property
    def error_message(self) -> Optional[str]:
        if self.status is SubmissionStatus.ERROR:
            return SUBMIT_ERROR_MESSAGE
        return None

    def reset(self) -> None:
        """Leave the ERROR state, keeping the captured answers."""
        if self.status is not SubmissionStatus.ERROR:
            raise SessionError(f"cannot reset from {self.status.value}")
        self._set_status(SubmissionStatus.IDLE)
        self.error = None

    def submit(self) -> Set[str]:
        """
        Validate and deliver the response.

        Returns:
            Failing question ids. If non-empty nothing was sent and the
            status is unchanged.

        Raises:
            SessionError: If a submission is in flight or already succeeded
        """
        if self.status is SubmissionStatus.SUBMITTING:
            raise SessionError("a submission is already in flight")
        if self.status is SubmissionStatus.SUCCESS:
            raise SessionError("this response has already been submitted")
        if self.status is SubmissionStatus.ERROR:
            self.reset()

        failing = self.capture.validate_for_submit()
        if failing:
            return failing

        self._set_status(SubmissionStatus.SUBMITTING)
        result = self._client.submit(self.endpoint_url, self.survey, self.capture.response)
        if result.ok:
            self.capture.finalize()
            self._set_status(SubmissionStatus.SUCCESS)
            logger.info("Response delivered to %s", self.endpoint_url)
        else:
            self.error = result.error
            self._set_status(SubmissionStatus.ERROR)
        return set()


def start_session(
    location: Union[str, Mapping[str, str], None] = None,
    endpoint_store: Optional[EndpointStore] = None,
    client: Optional[SubmissionClient] = None,
    generator: Optional[SurveyGenerator] = None,
    default_survey: Optional[Survey] = None,
) -> Union[AuthorSession, FillSession]:
    """
    Start a session for the given location.

    A location with a valid share link opens a FillSession. Otherwise an
    AuthorSession over the default survey is returned; if a link was
    present but could not be decoded, its `error` says so.
    """
    error = None
    if location:
        try:
            survey, endpoint_url = decode_share_link(location)
        except LinkDecodeError as e:
            if not e.missing:
                logger.error("Failed to open survey from link: %s", e)
                error = LINK_ERROR_MESSAGE
        else:
            logger.info("Opening shared survey %r in fill mode", survey.title)
            return FillSession(survey, endpoint_url, client=client)

    logger.info("Starting authoring session")
    return AuthorSession(
        survey=default_survey,
        endpoint_store=endpoint_store,
        base_url=location if isinstance(location, str) else "",
        generator=generator,
        error=error,
    )
