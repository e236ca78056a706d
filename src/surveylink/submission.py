"""
Fire-and-forget delivery of a completed response to a remote endpoint.

The endpoint is typically a spreadsheet web app on another origin that
does not expose its response to the caller. The transport contract
therefore only reports transport-level failure: the POST is sent, the
connection is closed without reading the status line or the body, and
any call that completes at the transport level counts as SUCCESS even if
the remote side rejected the payload.

Do not add response inspection here. There is nothing readable to inspect
in the deployment this client targets.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from surveylink.model import Survey, SurveyResponse
from surveylink.serialization import survey_to_dict

logger = logging.getLogger(__name__)


class SubmissionOutcome(Enum):
    SUCCESS = "success"
    ERROR = "error"


class SubmissionTransportError(Exception):
    """Network or URL failure while delivering a response."""
    pass


@dataclass
class SubmissionResult:
    outcome: SubmissionOutcome
    error: Optional[SubmissionTransportError] = None

    @property
    def ok(self) -> bool:
        return self.outcome is SubmissionOutcome.SUCCESS


def submission_payload(survey: Survey, response: SurveyResponse) -> bytes:
    """JSON body `{"survey": ..., "response": ...}`."""
    body = {"survey": survey_to_dict(survey), "response": response}
    return json.dumps(body, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


class SubmissionClient:
    """
    Posts responses with an httpx client.

    Args:
        client: httpx.Client to use (a private one is created if omitted)
        timeout: Seconds before the request is abandoned. None means no
            timeout, which is the default.
    """

    def __init__(self, client: Optional[httpx.Client] = None, timeout: Optional[float] = None):
        self._client = client or httpx.Client(timeout=timeout)
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "SubmissionClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _post(self, endpoint_url: str, body: bytes) -> None:
        try:
            with self._client.stream(
                "POST",
                endpoint_url,
                content=body,
                headers={"Content-Type": "application/json"},
            ):
                pass
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise SubmissionTransportError(str(e)) from e

    def submit(self, endpoint_url: str, survey: Survey, response: SurveyResponse) -> SubmissionResult:
        """
        Deliver one response.

        Returns:
            SubmissionResult with ERROR only if the request could not be
            sent; SUCCESS otherwise
        """
        logger.info("Submitting response to %s", endpoint_url)
        try:
            self._post(endpoint_url, submission_payload(survey, response))
        except SubmissionTransportError as e:
            logger.error("Submission to %s failed: %s", endpoint_url, e)
            return SubmissionResult(SubmissionOutcome.ERROR, e)
        return SubmissionResult(SubmissionOutcome.SUCCESS)
