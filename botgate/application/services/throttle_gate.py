"""Throttle Gate: decides whether a matched handler chain may run.

For every inbound event the gate evaluates each active scope of the
matched handler (handler, enclosing groups, application) against its own
fixed window. Evaluation never short-circuits: every configured scope
accrues a hit for every attempted event, even when another scope in the
chain ends up denying it. The event runs only if every scope admits.

When the event is denied, the denying scope with the most time left
governs the reply. The caller is warned once per window of that scope;
further denials in the same window are silent.

Error handling:
- StoreUnavailableError propagates unchanged. The gate never decides an
  outcome on its own when the store is down.
- MisconfiguredScopeError propagates unchanged (fail fast).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from botgate.application.ports.clock import ClockProtocol
from botgate.application.ports.counter_store import CounterStorePort
from botgate.application.ports.warning_action import WarningAction, default_warning_action
from botgate.application.services.base import LoggingMixin
from botgate.application.services.rate_window_service import RateWindowStateMachine
from botgate.application.services.scope_resolver import ScopeResolver
from botgate.domain.errors.rate_limit import StoreUnavailableError
from botgate.domain.models.gate_decision import GateDecision, ScopeUsage
from botgate.domain.models.handler_tree import ScopeNode
from botgate.domain.models.rate_window import WindowDecision
from botgate.domain.models.scope import RateKey, RequesterIdentity, Scope
from botgate.infrastructure.monitoring.metrics import ThrottleMetrics, get_throttle_metrics

if TYPE_CHECKING:
    from botgate.application.services.dispatcher import EventContext


class ThrottleGate(LoggingMixin):
    """Enforces every quota scope in a handler's chain.

    Attributes:
        _windows: Fixed-window state machine over the counter store.
        _clock: Time source for "now".
        _resolver: Derives active scopes from the handler tree.
        _warning_action: Notification sent once per denial episode.
        _metrics: Prometheus counters.
    """

    def __init__(
        self,
        store: CounterStorePort,
        clock: ClockProtocol,
        resolver: ScopeResolver | None = None,
        warning_action: WarningAction = default_warning_action,
        metrics: ThrottleMetrics | None = None,
    ) -> None:
        """Initialize the gate.

        Args:
            store: Counter store backend shared by every scope.
            clock: Source of the current instant.
            resolver: Scope resolver (default: 60 second windows).
            warning_action: Coroutine invoked with (context, remaining_seconds)
                the first time a caller is denied within a window.
            metrics: Metrics collector (default: process-wide collector).
        """
        self._windows = RateWindowStateMachine(store)
        self._clock = clock
        self._resolver = resolver or ScopeResolver()
        self._warning_action = warning_action
        self._metrics = metrics or get_throttle_metrics()
        self._init_logger(component="throttle")

    async def admit(
        self,
        handler_node: ScopeNode,
        requester: RequesterIdentity,
        now: datetime | None = None,
    ) -> GateDecision:
        """Evaluate every active scope for one event.

        Args:
            handler_node: The matched handler (with its ancestor chain).
            requester: Identity the event is attributed to.
            now: Evaluation instant (default: the gate's clock).

        Returns:
            GateDecision.allow() or a denial carrying the governing scope,
            its remaining seconds and whether the caller must be warned.

        Raises:
            StoreUnavailableError: If the counter store fails.
            MisconfiguredScopeError: If a scope has a non-positive quota.
        """
        scopes = self._resolver.resolve(handler_node)
        if not scopes:
            self._metrics.record_check("unthrottled")
            return GateDecision.allow()

        if now is None:
            now = self._clock.now()
        log = self._log_operation(
            "admit",
            requester=requester.as_key_part(),
            scopes=[scope.scope_id for scope in scopes],
        )

        try:
            denials: list[tuple[Scope, str, WindowDecision]] = []
            for scope in scopes:
                key = str(RateKey.for_scope(scope, requester))
                decision = await self._windows.check_and_increment(
                    key, scope.limit, scope.window_seconds, now
                )
                if not decision.admitted:
                    denials.append((scope, key, decision))
                    self._metrics.record_scope_denial(scope.kind.value)

            if not denials:
                self._metrics.record_check("allowed")
                log.debug("throttle_admitted")
                return GateDecision.allow()

            scope, key, decision = max(denials, key=lambda denial: denial[2].remaining)
            should_warn = False
            if not decision.already_warned:
                should_warn = await self._windows.mark_warned(
                    key, decision.window_start, scope.window_seconds, now
                )
        except StoreUnavailableError as exc:
            self._metrics.record_store_error()
            log.error("store_unavailable", error=str(exc))
            raise

        self._metrics.record_check("denied")
        log.info(
            "throttle_denied",
            governing_scope=scope.scope_id,
            denying_scopes=len(denials),
            remaining=decision.remaining,
            should_warn=should_warn,
        )
        return GateDecision.deny(scope, decision.remaining, should_warn)

    async def guard(self, handler_node: ScopeNode, context: EventContext) -> bool:
        """Admit the event and warn the caller if this denial calls for it.

        Returns:
            True if the handler may run.
        """
        decision = await self.admit(handler_node, context.requester)
        if decision.allowed:
            return True
        if decision.should_warn:
            await self._warning_action(context, decision.available_in)
            self._metrics.record_warning()
            self._log_operation("guard", requester=context.requester.as_key_part()).info(
                "throttle_warning_sent",
                available_in=decision.available_in,
            )
        return False

    async def clear(self, handler_node: ScopeNode, requester: RequesterIdentity) -> None:
        """Reset every window of the handler's chain for one requester.

        The shared application-wide window is reset for everyone.
        """
        for scope in self._resolver.resolve(handler_node):
            await self._windows.clear(str(RateKey.for_scope(scope, requester)))

    async def usage(
        self,
        handler_node: ScopeNode,
        requester: RequesterIdentity,
        now: datetime | None = None,
    ) -> list[ScopeUsage]:
        """Report each scope's live window for a requester without writing."""
        if now is None:
            now = self._clock.now()
        report: list[ScopeUsage] = []
        for scope in self._resolver.resolve(handler_node):
            record = await self._windows.inspect(
                str(RateKey.for_scope(scope, requester)), scope.window_seconds, now
            )
            if record is None:
                report.append(
                    ScopeUsage(scope, hits=0, remaining_attempts=scope.limit, resets_in=0)
                )
                continue
            report.append(
                ScopeUsage(
                    scope,
                    hits=record.count,
                    remaining_attempts=max(0, scope.limit - record.count),
                    resets_in=int(record.remaining_seconds(scope.window_seconds, now)),
                    warned=record.warned,
                )
            )
        return report
