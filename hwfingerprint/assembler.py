"""
hwfingerprint.assembler

Fingerprint assembly: best-effort collection, fatal only at the WMI gate

Flow:
1) open Winmgmt + wait for Running   (ServiceUnavailableError propagates)
2) select access strategy once
3) six hardware categories in fixed order, each failure -> ""
4) hostname / primary IP / MAC, each failure -> ""
5) return the fully shaped nine-key map
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from hwfingerprint.collectors.base import CategoryOutcome, run_category
from hwfingerprint.collectors.host import HostIdentity
from hwfingerprint.collectors.sources import (
    AttributeSource,
    CommandRunner,
    StructuredQuery,
    build_source,
)
from hwfingerprint.logging import EventLog
from hwfingerprint.model import (
    BIOS_KEY,
    DISK_KEY,
    HOSTNAME_KEY,
    IP_ADDRESS_KEY,
    MAC_ADDRESS_KEY,
    MEMORY_KEY,
    PROCESSOR_KEY,
    SYSTEM_KEY,
    UUID_KEY,
    empty_fingerprint,
    validate_fingerprint,
)
from hwfingerprint.readiness import ServiceManager, open_instrumentation_service, wait_for_service
from hwfingerprint.settings import Settings
from hwfingerprint.strategy import AccessStrategy, PlatformInfo, select_strategy


@dataclass(frozen=True)
class FingerprintResult:
    """
    Map plus diagnostics
    - fingerprint: public nine-key map
    - outcomes: per-key results, error details kept out of the map
    """

    fingerprint: dict[str, str]
    strategy: AccessStrategy
    outcomes: dict[str, CategoryOutcome] = field(default_factory=dict)

    def failed(self) -> list[str]:
        return sorted(name for name, outcome in self.outcomes.items() if not outcome.ok)


class FingerprintAssembler:
    """
    Computes hardware fingerprints from injected collaborators

    Holds no per-call state; compute() may be called repeatedly.
    """

    def __init__(
        self,
        *,
        service_manager: ServiceManager,
        platform_info: PlatformInfo,
        command_runner: CommandRunner,
        structured_query: StructuredQuery,
        host_identity: HostIdentity,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.service_manager = service_manager
        self.platform_info = platform_info
        self.command_runner = command_runner
        self.structured_query = structured_query
        self.host_identity = host_identity
        self.settings = settings if settings is not None else Settings()
        self.sleep = sleep
        self.log = EventLog(self.settings.log_level)

    def _wait_for_wmi(self) -> None:
        service = open_instrumentation_service(self.service_manager, self.settings.service_name)
        wait_for_service(
            service,
            retries=self.settings.service_retries,
            interval_s=self.settings.service_retry_interval_s,
            sleep=self.sleep,
            log=self.log,
        )

    def _collect_hardware(self, source: AttributeSource) -> list[CategoryOutcome]:
        backend = source.strategy.value
        plan = (
            (UUID_KEY, source.uuid),
            (PROCESSOR_KEY, source.processor),
            (MEMORY_KEY, source.memory),
            (BIOS_KEY, source.bios),
            (SYSTEM_KEY, source.system),
            (DISK_KEY, source.disk),
        )

        outcomes: list[CategoryOutcome] = []
        for key, query in plan:
            outcome = run_category(key, query, backend=backend)
            if outcome.ok:
                self.log.emit("category_collected", level="debug", category=key, backend=backend)
            else:
                self.log.emit(
                    "category_failed",
                    level="warning",
                    category=key,
                    backend=backend,
                    error_type=outcome.error_type,
                    message=outcome.error_message,
                )
            outcomes.append(outcome)
        return outcomes

    def _collect_host(self) -> list[CategoryOutcome]:
        plan = (
            (HOSTNAME_KEY, self.host_identity.hostname),
            (IP_ADDRESS_KEY, self.host_identity.primary_ip),
            (MAC_ADDRESS_KEY, self.host_identity.mac_address),
        )

        outcomes: list[CategoryOutcome] = []
        for key, query in plan:
            outcome = run_category(key, query)
            if not outcome.ok:
                self.log.emit(
                    "host_info_failed",
                    level="warning",
                    category=key,
                    error_type=outcome.error_type,
                    message=outcome.error_message,
                )
            outcomes.append(outcome)
        return outcomes

    def compute_with_outcomes(self) -> FingerprintResult:
        """
        Compute the fingerprint, keeping per-category outcomes

        Raises ServiceUnavailableError when WMI cannot be reached; every
        other failure only blanks its own key.
        """
        try:
            self._wait_for_wmi()
        except Exception as e:
            self.log.emit(
                "wmi_unavailable",
                level="error",
                service=self.settings.service_name,
                error_type=type(e).__name__,
                message=str(e),
            )
            raise

        strategy = select_strategy(
            self.platform_info,
            threshold=self.settings.structured_query_min_version,
            interface=self.settings.interface,
            log=self.log,
        )
        source = build_source(
            strategy,
            runner=self.command_runner,
            query=self.structured_query,
            wmic_path=self.settings.wmic_path,
        )

        fingerprint = empty_fingerprint()
        outcomes: dict[str, CategoryOutcome] = {}
        for outcome in self._collect_hardware(source) + self._collect_host():
            fingerprint[outcome.name] = outcome.as_map_value()
            outcomes[outcome.name] = outcome

        validate_fingerprint(fingerprint)
        return FingerprintResult(fingerprint=fingerprint, strategy=strategy, outcomes=outcomes)

    def compute(self) -> dict[str, str]:
        return self.compute_with_outcomes().fingerprint
