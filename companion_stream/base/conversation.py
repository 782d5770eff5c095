"""Shared conversation bookkeeping for backends.

:class:`ConversationCompanion` implements the ``Companion`` protocol once;
concrete backends only describe their wire format (payload builders, auth
headers and dialect). History is appended only after a turn finishes
successfully, so a failed or cancelled turn can simply be retried.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import CompanionConfig
from .cancellation import CancellationToken
from .errors import DecodeError, ErrorCode, HTTPStatusError, StreamError, StreamIOError, classify_exception
from .exchange import stream_exchange
from .http import get_httpx_client
from .interfaces import ProgressIndicator
from .logging import LogContext, get_logger, log_event
from .models import Message, ModelInfo
from .streaming import DeltaCallback, Dialect, StreamOrchestrator, StreamOutcome


class ConversationCompanion:
    """Base class holding config, history, HTTP client and decoder settings.

    Subclasses set ``backend`` and ``dialect`` and implement
    :meth:`build_chat_payload`, :meth:`build_generate_payload` and
    :meth:`parse_models`.
    """

    backend: str = ""
    dialect: Dialect = Dialect.NEWLINE_DELIMITED

    def __init__(
        self,
        config: CompanionConfig,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if config.backend != self.backend:
            raise ValueError(f"{type(self).__name__} cannot use {config.backend!r} configuration")
        self.config = config
        self.model = config.model
        self._logger = logger or get_logger(self.backend)
        self._client = get_httpx_client(
            None,
            purpose=f"{self.backend}.stream",
            read_timeout=config.http_timeout,
            transport=transport,
        )
        self._orchestrator = StreamOrchestrator(
            buffer_size=config.buffer_size,
            backend=self.backend,
            model=self.model,
            trace_frames=config.terminal.trace,
            logger=self._logger,
        )
        self._system = Message(role="system", content=config.system_prompt)
        self._history: List[Message] = []

    @property
    def conversation(self) -> List[Message]:
        """Copy of the turns exchanged so far (system prompt excluded)."""
        return list(self._history)

    def prepare_conversation(self) -> List[Message]:
        """System prompt followed by the most recent ``max_messages`` turns."""
        return [self._system] + self._history[-self.config.max_messages :]

    def reset(self) -> None:
        self._history.clear()

    def headers(self) -> Dict[str, str]:
        return {}

    def build_chat_payload(self, messages: List[Message]) -> Dict[str, Any]:  # pragma: no cover - abstract
        raise NotImplementedError

    def build_generate_payload(self, prompt: str) -> Dict[str, Any]:  # pragma: no cover - abstract
        raise NotImplementedError

    def parse_models(self, payload: Any) -> List[ModelInfo]:  # pragma: no cover - abstract
        raise NotImplementedError

    def chat(
        self,
        prompt: str,
        callback: Optional[DeltaCallback] = None,
        *,
        images: Optional[List[str]] = None,
        indicator: Optional[ProgressIndicator] = None,
        token: Optional[CancellationToken] = None,
    ) -> StreamOutcome:
        """Send the next user turn and stream the reply."""
        user = Message(role="user", content=prompt, images=images or None)
        messages = self.prepare_conversation() + [user]
        outcome = stream_exchange(
            self._client,
            str(self.config.chat_url),
            self.build_chat_payload(messages),
            orchestrator=self._orchestrator,
            dialect=self.dialect,
            callback=callback,
            headers=self.headers(),
            indicator=indicator,
            token=token,
        )
        if outcome.ok:
            assert outcome.message is not None  # nosec B101
            self._history.append(user)
            self._history.append(outcome.message)
        return outcome

    def generate(
        self,
        prompt: str,
        callback: Optional[DeltaCallback] = None,
        *,
        indicator: Optional[ProgressIndicator] = None,
        token: Optional[CancellationToken] = None,
    ) -> StreamOutcome:
        """Single-shot completion against the generate endpoint (no history)."""
        return stream_exchange(
            self._client,
            str(self.config.generate_url),
            self.build_generate_payload(prompt),
            orchestrator=self._orchestrator,
            dialect=self.dialect,
            callback=callback,
            headers=self.headers(),
            indicator=indicator,
            token=token,
        )

    def list_models(self) -> List[ModelInfo]:
        """Return the models the backend can serve.

        Unlike a turn, the listing is not streamed; failures are raised.

        Raises:
            StreamIOError: the request could not be sent or timed out.
            HTTPStatusError: the backend answered with a non-2xx status.
            DecodeError: the body is not the expected JSON listing.
        """
        headers = {**self.headers(), "Accept": "application/json"}
        try:
            response = self._client.get(str(self.config.models_url), headers=headers)
        except (httpx.HTTPError, OSError) as exc:
            code = ErrorCode.TIMEOUT if classify_exception(exc) is ErrorCode.TIMEOUT else ErrorCode.IO
            raise self._labelled(
                StreamIOError(message=f"model listing failed: {type(exc).__name__}: {exc}", code=code, raw=exc)
            ) from exc
        if not 200 <= response.status_code < 300:
            raise self._labelled(
                HTTPStatusError(
                    message=f"unexpected HTTP status {response.status_code} listing models",
                    status_code=response.status_code,
                    body=response.text[:4096] or None,
                )
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise self._labelled(DecodeError(message="model listing is not JSON", raw=exc)) from exc
        try:
            models = self.parse_models(payload)
        except StreamError as exc:
            self._labelled(exc)
            raise
        log_event(self._logger, "models.list", LogContext.for_turn(self.backend, self.model), count=len(models))
        return models

    def _labelled(self, error: StreamError) -> StreamError:
        error.backend = error.backend or self.backend
        error.model = error.model or self.model
        return error


__all__ = ["ConversationCompanion"]
