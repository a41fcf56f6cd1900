from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Union

FINISHED_STATUS = "Finished"


@dataclass(slots=True, frozen=True)
class ClientConfig:
    """Credentials and feature flags a client is bound to for its lifetime."""
    app_id: str
    app_key: str
    preview: Optional[bool] = False
    verbose: Optional[bool] = False

    def __post_init__(self) -> None:
        from .validation import validate_app_info, validate_flag

        validate_app_info(self.app_id, "Application Id")
        validate_app_info(self.app_key, "Subscription Key")
        object.__setattr__(self, "preview", validate_flag(self.preview, "Preview"))
        object.__setattr__(self, "verbose", validate_flag(self.verbose, "Verbose"))


@dataclass(slots=True)
class Intent:
    intent: str = ""
    score: Optional[float] = None
    actions: Optional[list[dict[str, Any]]] = None
    # item exactly as the service sent it, dict or not
    raw: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Any) -> "Intent":
        fields = data if isinstance(data, dict) else {}
        return cls(
            intent=fields.get("intent", ""),
            score=fields.get("score"),
            actions=fields.get("actions"),
            raw=data,
        )

    def to_dict(self) -> Any:
        if self.raw is not None:
            return dict(self.raw) if isinstance(self.raw, dict) else self.raw
        out: dict[str, Any] = {"intent": self.intent}
        if self.score is not None:
            out["score"] = self.score
        if self.actions is not None:
            out["actions"] = self.actions
        return out


@dataclass(slots=True)
class Entity:
    entity: str = ""
    type: Optional[str] = None
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    score: Optional[float] = None
    raw: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Any) -> "Entity":
        fields = data if isinstance(data, dict) else {}
        return cls(
            entity=fields.get("entity", ""),
            type=fields.get("type"),
            start_index=fields.get("startIndex"),
            end_index=fields.get("endIndex"),
            score=fields.get("score"),
            raw=data,
        )

    def to_dict(self) -> Any:
        if self.raw is not None:
            return dict(self.raw) if isinstance(self.raw, dict) else self.raw
        out: dict[str, Any] = {"entity": self.entity}
        for key, value in (
            ("type", self.type),
            ("startIndex", self.start_index),
            ("endIndex", self.end_index),
            ("score", self.score),
        ):
            if value is not None:
                out[key] = value
        return out


@dataclass(slots=True)
class DialogState:
    """Multi-turn state returned by the preview endpoint."""
    status: str = ""
    context_id: str = ""
    parameter_name: Optional[str] = None
    prompt: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Any) -> "DialogState":
        data = data if isinstance(data, dict) else {}
        return cls(
            status=data.get("status", ""),
            context_id=data.get("contextId", ""),
            parameter_name=data.get("parameterName"),
            prompt=data.get("prompt"),
            raw=dict(data),
        )

    def is_finished(self) -> bool:
        return self.status == FINISHED_STATUS

    @property
    def finished(self) -> bool:
        return self.is_finished()

    def to_dict(self) -> dict[str, Any]:
        if self.raw:
            out = dict(self.raw)
        else:
            out = {"status": self.status, "contextId": self.context_id}
            if self.parameter_name is not None:
                out["parameterName"] = self.parameter_name
            if self.prompt is not None:
                out["prompt"] = self.prompt
        out["isFinished"] = self.is_finished()
        return out


@dataclass(slots=True)
class PredictionResult:
    """
    Interpreted reply of the prediction service.

    `top_scoring_intent` and `intents` are kept consistent by the
    normalizer: when the service sends only one of them the other is
    derived from it.
    """
    query: str = ""
    top_scoring_intent: Optional[Intent] = None
    intents: list[Intent] = field(default_factory=list)
    entities: list[Entity] = field(default_factory=list)
    dialog: Optional[DialogState] = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PredictionResult":
        top = data.get("topScoringIntent")
        intents = data.get("intents")
        entities = data.get("entities")
        dialog = data.get("dialog")
        # non-list intents/entities stay untouched in raw
        return cls(
            query=data.get("query") or "",
            top_scoring_intent=Intent.from_dict(top) if top is not None else None,
            intents=[Intent.from_dict(i) for i in intents] if isinstance(intents, list) else [],
            entities=[Entity.from_dict(e) for e in entities] if isinstance(entities, list) else [],
            dialog=DialogState.from_dict(dialog) if isinstance(dialog, dict) else None,
            raw=dict(data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Augmented JSON-shaped view, camelCase keys as sent by the service."""
        out = dict(self.raw)
        out["query"] = self.query
        if isinstance(self.raw.get("intents", []), list):
            out["intents"] = [i.to_dict() for i in self.intents]
        if isinstance(self.raw.get("entities", []), list):
            out["entities"] = [e.to_dict() for e in self.entities]
        if self.top_scoring_intent is not None:
            out["topScoringIntent"] = self.top_scoring_intent.to_dict()
        if self.dialog is not None:
            out["dialog"] = self.dialog.to_dict()
        return out


SuccessHandler = Callable[[PredictionResult], Union[None, Awaitable[None]]]
FailureHandler = Callable[[Exception], Union[None, Awaitable[None]]]


@dataclass(slots=True)
class ResponseHandlers:
    """Callback pair invoked exactly once per request, sync or async."""
    on_success: SuccessHandler
    on_failure: FailureHandler
