"""Action - Declarative description of one HTTP operation.

An Action records the verb, path template, query keys, body transform, and
per-status response handlers for a request. It holds no behaviour beyond
storage; ActionInvoker reads it to build and dispatch requests.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from resource_kit.models import HttpVerb, Response

ResponseHandler = Callable[[Response], Any]


@dataclass(frozen=True)
class BodyTransform:
    """A function that turns invocation arguments into a request body.

    `arity` is how many leading body arguments `func` receives. None means it
    receives all of them. There is no default: the arity is always stated, never
    read off the function signature.
    """

    func: Callable[..., Any]
    arity: int | None

    def __post_init__(self) -> None:
        if self.arity is not None and self.arity < 0:
            raise ValueError(f"arity must be non-negative, got {self.arity}")


class Action:
    """One HTTP action: verb, path, query keys, body transform, handlers.

    Usage:
        action = Action("find", verb="get", path="/users/:id")

        @action.handler(404)
        def not_found(response):
            return None
    """

    def __init__(
        self,
        name: str,
        verb: HttpVerb | str = HttpVerb.GET,
        path: str = "/",
        query_keys: Iterable[str] = (),
    ) -> None:
        self.name = name
        self.verb = verb
        self.path = path
        self.query_keys = query_keys
        self._body_transform: BodyTransform | None = None
        self._handlers: dict[int, ResponseHandler] = {}

    @property
    def verb(self) -> HttpVerb:
        return self._verb

    @verb.setter
    def verb(self, value: HttpVerb | str) -> None:
        self._verb = HttpVerb.parse(value)

    @property
    def query_keys(self) -> tuple[str, ...]:
        return self._query_keys

    @query_keys.setter
    def query_keys(self, keys: Iterable[str]) -> None:
        self._query_keys = tuple(str(key) for key in keys)

    @property
    def body_transform(self) -> BodyTransform | None:
        return self._body_transform

    @property
    def handlers(self) -> dict[int, ResponseHandler]:
        """Registered handlers by status code (a copy)."""
        return dict(self._handlers)

    def body(
        self,
        func: Callable[..., Any] | None = None,
        *,
        arity: int | None,
    ) -> Any:
        """Set the body transform. Works directly or as a decorator.

        `arity` is keyword-required: the number of leading invocation arguments
        passed to the transform, or None for all of them. A transform that takes
        two arguments must be registered with arity=2.

            action.body(lambda a, b: a + b, arity=2)

            @action.body(arity=2)
            def payload(first, second): ...
        """
        if func is None:
            def decorator(f: Callable[..., Any]) -> Callable[..., Any]:
                self._body_transform = BodyTransform(f, arity)
                return f
            return decorator

        self._body_transform = BodyTransform(func, arity)
        return func

    def handler(self, status: int, func: ResponseHandler | None = None) -> Any:
        """Register a response handler for a status code. Last write wins.

        Works directly (`action.handler(200, func)`) or as a decorator
        (`@action.handler(200)`).
        """
        status = int(status)
        if func is None:
            def decorator(f: ResponseHandler) -> ResponseHandler:
                self._handlers[status] = f
                return f
            return decorator

        self._handlers[status] = func
        return func

    def handler_for(self, status: int) -> ResponseHandler | None:
        return self._handlers.get(status)

    def __repr__(self) -> str:
        return f"Action({self.name!r}, verb={self.verb.value!r}, path={self.path!r})"
