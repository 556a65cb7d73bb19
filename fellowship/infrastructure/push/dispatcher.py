"""Batch push messages to the provider and log every failure locally.

Nothing in here raises past :meth:`PushDispatcher.dispatch`. Invalid tokens,
rejected tickets and failed HTTP calls each reduce to "this token did not get
this message" plus a log line.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, Protocol

from fellowship.domain.entities import (
    DeliveryTarget,
    DispatchReport,
    DispatchTicket,
    PushMessage,
)

logger = logging.getLogger(__name__)


class PushClient(Protocol):
    max_batch_size: int

    def is_valid_token(self, token: str) -> bool: ...

    # One ticket per message, in message order.
    def send(self, messages: Sequence[PushMessage]) -> list[DispatchTicket]: ...


def chunked(items: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    """Yield consecutive slices of ``items`` holding at most ``size`` entries."""

    if size < 1:
        raise ValueError("Chunk size must be at least 1")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def _as_target(token: str | DeliveryTarget) -> DeliveryTarget:
    if isinstance(token, DeliveryTarget):
        return token
    return DeliveryTarget(token=token)


class PushDispatcher:
    """Turn a flat token list into provider-sized push requests."""

    def __init__(self, client: PushClient, *, batch_size: int | None = None) -> None:
        limit = client.max_batch_size
        self._client = client
        self._batch_size = min(batch_size or limit, limit)

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def close(self) -> None:
        close = getattr(self._client, "close", None)
        if callable(close):
            close()

    def dispatch(
        self,
        tokens: Iterable[str | DeliveryTarget],
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> DispatchReport:
        report = DispatchReport()
        valid: list[DeliveryTarget] = []
        for target in map(_as_target, tokens):
            if self._client.is_valid_token(target.token):
                valid.append(target)
                continue
            report.invalid += 1
            logger.warning(
                "Skipping invalid push token %r for user %s", target.token, target.user_id
            )

        payload = dict(data or {})
        for chunk in chunked(valid, self._batch_size):
            report.batches += 1
            report.attempted += len(chunk)
            messages = [
                PushMessage(to=target.token, title=title, body=body, data=payload)
                for target in chunk
            ]
            try:
                tickets = self._client.send(messages)
            except Exception:
                report.failed += len(chunk)
                logger.exception(
                    "Push batch %s of %s messages failed to send", report.batches, len(chunk)
                )
                continue
            self._reconcile(chunk, tickets, report)

        logger.info(
            "Push dispatch finished: attempted=%s sent=%s failed=%s invalid=%s batches=%s",
            report.attempted,
            report.sent,
            report.failed,
            report.invalid,
            report.batches,
        )
        return report

    @staticmethod
    def _reconcile(
        chunk: Sequence[DeliveryTarget],
        tickets: Sequence[DispatchTicket],
        report: DispatchReport,
    ) -> None:
        for target, ticket in zip(chunk, tickets):
            if not ticket.is_error:
                report.sent += 1
                continue
            report.failed += 1
            logger.error(
                "Push ticket error for token %s (user %s): %s %s",
                ticket.token,
                target.user_id,
                ticket.message,
                ticket.error_detail or {},
            )
        missing = len(chunk) - len(tickets)
        if missing > 0:
            report.failed += missing
            logger.error("Push provider returned %s fewer tickets than messages", missing)


__all__ = ["PushClient", "PushDispatcher", "chunked"]
