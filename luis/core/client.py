"""
Client for the LUIS prediction service.

Issues one HTTP GET per call and hands back a normalized PredictionResult.

Server API Expected:
    GET {endpoint}[/preview]?id=<app id>&subscription-key=<key>
        [&contextid=<dialog context>][&verbose=true]&q=<query text>

    Response:
        {"query": "...", "topScoringIntent": {...}, "intents": [...],
         "entities": [...], "dialog": {"status": "...", "contextId": "..."}}
"""

import inspect
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union
from urllib.parse import quote

import httpx

from .contracts import ClientConfig, PredictionResult, ResponseHandlers
from .errors import AuthError, ConfigError, LUISError, ModeError
from .response import normalize_response
from .validation import extract_context_id, validate_handlers, validate_text

logger = logging.getLogger("luis_client")

DEFAULT_ENDPOINT = "https://api.projectoxford.ai/luis/v1/application"
DEFAULT_TIMEOUT = 30.0

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_.~"
_URI_COMPONENT_SAFE = "!*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_predict_url(endpoint: str, config: ClientConfig, text: str) -> str:
    return (
        f"{endpoint.rstrip('/')}{'/preview' if config.preview else ''}"
        f"?id={encode_component(config.app_id)}"
        f"&subscription-key={encode_component(config.app_key)}"
        f"{'&verbose=true' if config.verbose else ''}"
        f"&q={encode_component(text)}"
    )


def build_reply_url(endpoint: str, config: ClientConfig, context_id: str, text: str) -> str:
    return (
        f"{endpoint.rstrip('/')}{'/preview' if config.preview else ''}"
        f"?id={encode_component(config.app_id)}"
        f"&subscription-key={encode_component(config.app_key)}"
        f"&contextid={encode_component(context_id)}"
        f"{'&verbose=true' if config.verbose else ''}"
        f"&q={encode_component(text)}"
    )


async def fetch_prediction(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> PredictionResult:
    """
    GET a prediction URL and normalize the reply.

    Args:
        url: Fully built prediction or reply URL
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests)

    Returns:
        Normalized PredictionResult

    Raises:
        AuthError: On non-2xx status or network failure
        ProtocolError: On malformed or error-shaped body
    """
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        try:
            response = await client.get(url)
        except httpx.TimeoutException as e:
            logger.error("LUIS request timed out after %.1fs", timeout)
            raise AuthError("Invalid Subscription Key") from e
        except httpx.RequestError as e:
            logger.error("LUIS network error: %s", e)
            raise AuthError("Invalid Subscription Key") from e

    status = response.status_code
    if not 200 <= status < 300:
        logger.error("LUIS server error: %s %s", status, response.text[:200])
        if status == 400:
            raise AuthError("Invalid Application Id")
        raise AuthError("Invalid Subscription Key")

    return normalize_response(response.text)


async def _invoke(fn, arg) -> None:
    outcome = fn(arg)
    if inspect.isawaitable(outcome):
        await outcome


class LUISClient:
    """
    Bound to one validated ClientConfig; holds no other state.

    Usage:
        client = create_client({"app_id": "...", "app_key": "...", "preview": True})
        result = await client.predict("book a flight to Cairo")
        if result.dialog and not result.dialog.is_finished():
            result = await client.reply("tomorrow", result)
    """

    def __init__(
        self,
        config: ClientConfig,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def predict(self, text: Any, handlers: Any = None) -> Optional[PredictionResult]:
        """
        Predict the intent of TEXT.

        Without handlers the result is returned and service errors raised.
        With handlers exactly one of on_success/on_failure is called.
        """
        text = validate_text(text)
        if handlers is not None:
            handlers = validate_handlers(handlers)
        url = build_predict_url(self.endpoint, self._config, text)
        logger.info("Predicting %d chars (preview=%s, verbose=%s)",
                    len(text), self._config.preview, self._config.verbose)
        return await self._deliver(url, handlers)

    async def reply(self, text: Any, prior_result: Any, handlers: Any = None) -> Optional[PredictionResult]:
        """Continue the dialog started by PRIOR_RESULT with TEXT (preview only)."""
        if not self._config.preview:
            raise ModeError("Reply can only be used with the preview version")
        text = validate_text(text)
        context_id = extract_context_id(prior_result)
        if handlers is not None:
            handlers = validate_handlers(handlers)
        url = build_reply_url(self.endpoint, self._config, context_id, text)
        logger.info("Replying to dialog %s with %d chars", context_id, len(text))
        return await self._deliver(url, handlers)

    async def _deliver(self, url: str, handlers: Optional[ResponseHandlers]) -> Optional[PredictionResult]:
        if handlers is None:
            return await fetch_prediction(url, self.timeout, self._transport)
        try:
            result = await fetch_prediction(url, self.timeout, self._transport)
        except LUISError as e:
            await _invoke(handlers.on_failure, e)
            return None
        await _invoke(handlers.on_success, result)
        return None


def _lookup(data: Mapping, *keys: str, required: Optional[str] = None):
    for key in keys:
        if key in data:
            return data[key]
    if required:
        raise ConfigError(f"You have to provide a {required} in the initialization data")
    return None


def create_client(
    config: Union[ClientConfig, Mapping, None],
    *,
    endpoint: str = DEFAULT_ENDPOINT,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> LUISClient:
    """
    Validate CONFIG and return a client bound to it.

    Args:
        config: ClientConfig, or a mapping with app_id, app_key and
                optional preview/verbose (appId/appKey also accepted)
        endpoint: Prediction service origin
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests)

    Raises:
        ConfigError: On missing or malformed credentials or flags
    """
    if config is None:
        raise ConfigError("Missing initialization data for LUISClient")
    if not isinstance(config, ClientConfig):
        if not isinstance(config, Mapping):
            raise ConfigError("Initialization data is not a mapping")
        config = ClientConfig(
            app_id=_lookup(config, "app_id", "appId", required="Application Id"),
            app_key=_lookup(config, "app_key", "appKey", required="Subscription Key"),
            preview=_lookup(config, "preview"),
            verbose=_lookup(config, "verbose"),
        )
    logger.debug("Created LUIS client for app %s (preview=%s, verbose=%s)",
                 config.app_id, config.preview, config.verbose)
    return LUISClient(config, endpoint=endpoint, timeout=timeout, transport=transport)
