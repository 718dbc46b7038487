"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Roster initialization, centralized
result emission (stdout/stderr routing + exit codes), and the process
log entries that bracket every command.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click
import structlog

from stargate.config.logging import bind_action, configure_logging
from stargate.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from stargate.config.settings import StargateSettings
    from stargate.infrastructure.roster import Roster
    from stargate.services.process_log import ProcessLogService
    from stargate.services.result import ServiceResult

log = structlog.get_logger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. The roster is lazily
    initialized on first use so ``--help`` and ``--version`` never
    touch the database.
    """

    def __init__(self, settings: StargateSettings) -> None:
        self.settings = settings
        self._roster: Roster | None = None
        self._action: tuple[str, str, dict[str, Any]] | None = None

        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )

        if settings.verbose:
            from stargate.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def roster(self) -> Roster:
        """The roster instance (created lazily on first access)."""
        if self._roster is None:
            from stargate.infrastructure.roster import Roster

            self._roster = Roster(self.settings)
        return self._roster

    @property
    def process_log(self) -> ProcessLogService | None:
        """Process log writer, or None when disabled in config."""
        if not self.settings.process_log.enabled:
            return None
        from stargate.services.process_log import ProcessLogService

        return ProcessLogService(self.roster)

    # ------------------------------------------------------------------
    # Process log bracketing
    # ------------------------------------------------------------------

    def begin_action(self, command: str, action: str, params: dict[str, Any]) -> None:
        """Remember the running command and record its start."""
        self._action = (command, action, params)
        bind_action(command, action)
        writer = self.process_log
        if writer is not None:
            writer.log_info(
                f"Starting {command}.{action}",
                command=command,
                action=action,
                request_data=params,
            )

    def record_crash(self, exc: BaseException, formatted: str) -> None:
        """Record an unexpected exception escaping a command."""
        log.error("command.crashed", error=str(exc))
        if self._action is None:
            return
        command, action, params = self._action
        writer = self.process_log
        if writer is not None:
            writer.log_error(
                f"Failed to complete {command}.{action}",
                exception=formatted,
                command=command,
                action=action,
                request_data=params,
            )

    def _record_outcome(self, result: ServiceResult) -> None:
        if self._action is None:
            return
        command, action, params = self._action
        writer = self.process_log
        if writer is None:
            return
        if result.ok:
            writer.log_success(
                f"Successfully completed {command}.{action}", command=command, action=action
            )
        else:
            writer.log_error(
                f"Failed to complete {command}.{action}",
                exception=f"{result.status_code} {result.message}",
                command=command,
                action=action,
                request_data=params,
            )

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        self._record_outcome(result)

        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
