"""
Shareable link codec.

A shareable link is the app's own URL carrying two query parameters:

    survey   = base64(percent-encode(canonical JSON of the Survey))
    endpoint = base64(UTF-8 bytes of the submission endpoint URL)

Percent-encoding turns arbitrary Unicode into ASCII before base64, using
the same unreserved set as JavaScript's encodeURIComponent so links stay
interchangeable with browser-generated ones.

Round-trip law:
    decode_share_link(encode_share_link(s, u, base)) == (s, u)
"""

import base64
import json
import logging
from typing import Mapping, Optional, Tuple, Union
from urllib.parse import parse_qs, quote, unquote, urlsplit, urlunsplit

from surveylink.model import Survey
from surveylink.serialization import SurveySchemaError, survey_from_dict, survey_to_json

logger = logging.getLogger(__name__)

SURVEY_PARAM = "survey"
ENDPOINT_PARAM = "endpoint"

# Characters encodeURIComponent leaves alone besides ASCII letters/digits and -_.
_URI_COMPONENT_SAFE = "!~*'()"


class LinkDecodeError(Exception):
    """
    Raised when a location does not carry a usable survey link.

    Attributes:
        missing: True if a required parameter was simply absent (no link
            at all), False if a link was present but broken.
    """

    def __init__(self, message: str, missing: bool = False):
        super().__init__(message)
        self.missing = missing


def percent_encode(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE, encoding="utf-8")


def percent_decode(text: str) -> str:
    return unquote(text, encoding="utf-8", errors="strict")


def b64encode_text(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def b64decode_text(data: str) -> str:
    # Query parsers decode '+' as space; base64 output never contains spaces.
    data = data.replace(" ", "+")
    return base64.b64decode(data, validate=True).decode("utf-8")


def encode_share_link(survey: Survey, endpoint_url: str, base_url: str) -> str:
    """
    Build a shareable link for `survey` submitting to `endpoint_url`.

    Args:
        survey: Survey to embed
        endpoint_url: Remote submission endpoint
        base_url: Current location; only scheme, host and path are kept

    Returns:
        str: `<origin><path>?survey=...&endpoint=...`

    Raises:
        ValueError: If `endpoint_url` is empty
    """
    if not endpoint_url:
        raise ValueError("a share link needs an endpoint URL")
    survey_data = b64encode_text(percent_encode(survey_to_json(survey)))
    endpoint = b64encode_text(endpoint_url)
    parts = urlsplit(base_url)
    origin_and_path = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
    return f"{origin_and_path}?{SURVEY_PARAM}={survey_data}&{ENDPOINT_PARAM}={endpoint}"


def query_params(location: Union[str, Mapping[str, str]]) -> Mapping[str, str]:
    """
    Normalize a location into a flat parameter mapping.

    Accepts a full URL, a bare query string (with or without '?') or an
    already-parsed mapping. Only the first value of a repeated key is kept.
    """
    if not isinstance(location, str):
        return location
    if "?" in location:
        query = location.split("?", 1)[1]
    elif "=" in location:
        query = location
    else:
        query = ""
    query = query.split("#", 1)[0]
    parsed = parse_qs(query, keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items()}


def decode_share_link(location: Union[str, Mapping[str, str]]) -> Tuple[Survey, str]:
    """
    Recover the survey and endpoint carried by a shareable link.

    Args:
        location: Full URL, query string or parsed parameter mapping

    Returns:
        (Survey, endpoint_url)

    Raises:
        LinkDecodeError: If a parameter is missing, is not valid base64,
            does not percent-decode, is not JSON, or does not have the
            shape of a Survey
    """
    params = query_params(location)
    survey_data: Optional[str] = params.get(SURVEY_PARAM)
    endpoint_data: Optional[str] = params.get(ENDPOINT_PARAM)
    if not survey_data or not endpoint_data:
        raise LinkDecodeError("link needs both 'survey' and 'endpoint'", missing=True)

    try:
        survey_text = percent_decode(b64decode_text(survey_data))
        endpoint_url = b64decode_text(endpoint_data)
        survey = survey_from_dict(json.loads(survey_text))
    except json.JSONDecodeError as e:
        logger.warning("Share link survey is not JSON: %s", e)
        raise LinkDecodeError(f"invalid survey JSON: {e}") from e
    except SurveySchemaError as e:
        logger.warning("Share link survey has the wrong shape: %s", e)
        raise LinkDecodeError(f"invalid survey: {e}") from e
    except ValueError as e:
        # binascii.Error, UnicodeDecodeError and non-ASCII input all land here
        logger.warning("Share link is not valid base64 text: %s", e)
        raise LinkDecodeError(f"invalid encoding: {e}") from e

    return survey, endpoint_url
