"""ActionInvoker - Builds, sends, and dispatches the request for one Action.

Each invocation runs a single pass:

    partition args -> resolve path -> resolve query -> build body
        -> client.execute -> dispatch response

The invoker keeps no state between calls. Transport errors raised by the
client propagate unchanged; nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from resource_kit.action import Action
from resource_kit.client import HttpClientProtocol
from resource_kit.path_template import MissingPathParameter, PathTemplate

logger = logging.getLogger(__name__)

__all__ = [
    "ActionInvoker",
    "ActionInvokerError",
    "BodyTransformArityError",
    "MissingPathParameter",
    "invoke",
]


class ActionInvokerError(Exception):
    """Base class for invoker errors."""


class BodyTransformArityError(ActionInvokerError, TypeError):
    """Raised when fewer body arguments were given than the transform takes."""

    def __init__(self, action_name: str, expected: int, given: int) -> None:
        self.action_name = action_name
        self.expected = expected
        self.given = given
        super().__init__(
            f"Body transform for action '{action_name}' takes {expected} "
            f"argument(s), {given} given"
        )


_EMPTY_BAG: Mapping[str, Any] = {}


class ActionInvoker:
    """Runs one Action against a client.

    Usage:
        result = ActionInvoker.invoke(action, client, id=12)
        result = ActionInvoker.invoke(action, client, "payload", {"id": 12})

    Keyword arguments are gathered into one mapping appended to the positional
    arguments. A trailing mapping is the parameter bag for path and query
    substitution; every argument, the bag included, is passed on to the body
    transform in call order.
    """

    def __init__(
        self,
        action: Action,
        client: HttpClientProtocol,
        args: Sequence[Any],
    ) -> None:
        self._action = action
        self._client = client
        self._args = tuple(args)
        self._params = self._partition(self._args)

    @classmethod
    def invoke(
        cls,
        action: Action,
        client: HttpClientProtocol,
        /,
        *args: Any,
        **params: Any,
    ) -> Any:
        """Execute `action` via `client` and return the transformed result.

        Raises:
            MissingPathParameter: A path placeholder has no value.
            BodyTransformArityError: Too few arguments for the body transform.
        """
        if params:
            args = (*args, params)
        return cls(action, client, args).run()

    @staticmethod
    def _partition(args: tuple[Any, ...]) -> Mapping[str, Any]:
        """Return the parameter bag: the trailing mapping, if there is one."""
        if args and isinstance(args[-1], Mapping):
            return args[-1]
        return _EMPTY_BAG

    @property
    def params(self) -> Mapping[str, Any]:
        return self._params

    @property
    def body_args(self) -> tuple[Any, ...]:
        return self._args

    def resolve_path(self) -> str:
        return PathTemplate(self._action.path).render(self._params)

    def resolve_query(self) -> list[tuple[str, str]]:
        """Query pairs for the action's keys that have a value in the bag.

        Keys missing from the bag, or mapped to None, are left out entirely.
        """
        return [
            (key, str(self._params[key]))
            for key in self._action.query_keys
            if self._params.get(key) is not None
        ]

    def build_url(self) -> str:
        path = self.resolve_path()
        query = self.resolve_query()
        if not query:
            return path
        # Merge so a literal query string in the template survives
        return str(httpx.URL(path).copy_merge_params(query))

    def build_body(self) -> Any:
        """Run the body transform, or return None when the action has none."""
        transform = self._action.body_transform
        if transform is None:
            return None

        if transform.arity is None:
            return transform.func(*self._args)

        if len(self._args) < transform.arity:
            raise BodyTransformArityError(self._action.name, transform.arity, len(self._args))
        return transform.func(*self._args[:transform.arity])

    def run(self) -> Any:
        url = self.build_url()
        body = self.build_body()

        logger.debug("Invoking action %s: %s %s", self._action.name, self._action.verb.value, url)
        response = self._client.execute(self._action.verb, url, body)

        handler = self._action.handler_for(response.status)
        if handler is None:
            return response.body

        logger.debug("Action %s: handler for status %d", self._action.name, response.status)
        return handler(response)


invoke = ActionInvoker.invoke
