"""
Response normalizer for the LUIS prediction service.

Turns the raw HTTP body into a PredictionResult:
    - empty body                -> ProtocolError("Invalid Application Id")
    - unparseable / non-object  -> ProtocolError
    - "statusCode" in the body  -> ProtocolError("Invalid Subscription Key")
    - only one of topScoringIntent / intents present -> the other is derived
    - dialog present            -> DialogState with is_finished()
"""

import json
import logging
from typing import Any, Optional, Union

from .contracts import PredictionResult
from .errors import ProtocolError

logger = logging.getLogger("luis_response")


def reconcile_intents(payload: dict[str, Any]) -> dict[str, Any]:
    """Derive topScoringIntent from intents[0], or intents from topScoringIntent."""
    top = payload.get("topScoringIntent")
    intents = payload.get("intents")
    if top is not None and not intents:
        payload["intents"] = [top]
    elif top is None and isinstance(intents, list) and intents:
        payload["topScoringIntent"] = intents[0]
    return payload


def normalize_payload(payload: Any) -> PredictionResult:
    if not isinstance(payload, dict):
        logger.error("Response body is not a JSON object: %s", type(payload).__name__)
        raise ProtocolError("Response body is not a JSON object")
    if "statusCode" in payload:
        logger.error(
            "Service returned an error envelope: %s %s",
            payload.get("statusCode"), payload.get("message", ""),
        )
        raise ProtocolError("Invalid Subscription Key")
    return PredictionResult.from_dict(reconcile_intents(dict(payload)))


def normalize_response(body: Optional[Union[str, bytes]]) -> PredictionResult:
    """
    Parse and augment a prediction response body.

    Args:
        body: Raw response text (or bytes) as received from the service

    Returns:
        PredictionResult with intents reconciled and dialog state typed

    Raises:
        ProtocolError: On empty, malformed or error-shaped bodies
    """
    if not body:
        raise ProtocolError("Invalid Application Id")
    try:
        payload = json.loads(body)
    except ValueError as e:
        logger.error("Could not parse response body: %s", e)
        raise ProtocolError(f"Malformed response body: {e}") from e
    result = normalize_payload(payload)
    logger.debug(
        "Normalized response: query=%r top=%s dialog=%s",
        result.query,
        result.top_scoring_intent.intent if result.top_scoring_intent else None,
        result.dialog.status if result.dialog else None,
    )
    return result
