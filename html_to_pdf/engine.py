#!/usr/bin/env python3
"""
Runs a wkhtmltopdf invocation and collects the output.

Two strategies are available. The piped strategy trusts the process to exit
and reads its stdout. The detached strategy defends against wkhtmltopdf
versions that never exit after writing: the output goes to a file, a
Watcher follows it for the EOF trailer and the process group is interrupted
once the trailer shows up.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

import os
import signal
import subprocess
import tempfile
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .command import Invocation, STDIN_MARKER
from .console import ConsoleLogger
from .errors import ConfigurationError
from .source import Source
from .verification import COMPLETION_PATTERN, verify_file_complete
from .watcher import Watcher, WatchState


@dataclass(frozen=True)
class GenerationRequest:
    """Everything needed to run one generation."""

    source: Source
    options: Tuple[str, ...] = ()
    path: Optional[str] = None
    ensure_termination: bool = False
    timeout: float = 10
    settle_delay: float = 5
    poll_interval: float = 0.1

    def __post_init__(self):
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive (got {self.timeout})")
        if self.ensure_termination:
            if not self.path:
                raise ConfigurationError("ensure_termination requires an output file")
            if self.settle_delay >= self.timeout:
                raise ConfigurationError(
                    f"settle_delay ({self.settle_delay}s) must be shorter than timeout ({self.timeout}s)"
                )


@dataclass
class ExecutionResult:
    """Raw output plus how the process ended."""

    output: bytes
    returncode: Optional[int]
    terminated: bool = False  # the engine stopped the process after completion
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.terminated or self.returncode == 0


class ExecutionEngine:
    """Runs invocations with the piped or the detached strategy."""

    # Seconds a process gets to exit after SIGINT before it is killed
    TERMINATION_GRACE = 2.0

    def __init__(self, logger: Optional[ConsoleLogger] = None):
        self.logger = logger or ConsoleLogger()

    def execute(self, request: GenerationRequest, invocation: Invocation,
                temp_file: Optional[Any] = None) -> ExecutionResult:
        """Run the invocation with the strategy the request asks for."""
        if request.ensure_termination:
            self.logger.debug(f"Running detached with completion watcher: {invocation}")
            return self._run_detached(request, invocation, temp_file)
        self.logger.debug(f"Running with pipes: {invocation}")
        return self._run_piped(request, invocation)

    def _run_piped(self, request: GenerationRequest, invocation: Invocation) -> ExecutionResult:
        stdin_data = None
        if request.source.is_html() and invocation.input_token == STDIN_MARKER:
            stdin_data = (str(request.source) + "\n").encode('utf-8')

        with subprocess.Popen(
            str(invocation),
            shell=True,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        ) as process:
            # communicate() closes stdin after writing and reads until stdout closes
            stdout, stderr = process.communicate(stdin_data)

        output = stdout
        if request.path:
            output = self._read_output(request.path)

        return ExecutionResult(
            output=output,
            returncode=process.returncode,
            stderr=stderr.decode('utf-8', errors='replace'),
        )

    def _run_detached(self, request: GenerationRequest, invocation: Invocation,
                      temp_file: Optional[Any]) -> ExecutionResult:
        target = request.path
        # Start from an empty target so nothing from an earlier run can be read back
        open(target, 'wb').close()

        terminated = False

        with tempfile.TemporaryFile() as stderr_file:
            process = subprocess.Popen(
                str(invocation),
                shell=True,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=stderr_file,
                start_new_session=True,
            )
            self.logger.debug(f"Spawned process group {process.pid}")

            def on_match(line, pattern):
                nonlocal terminated
                if process.poll() is None:
                    self.logger.debug(f"Watcher resolved on {line!r}, interrupting process group {process.pid}")
                    terminated = self._signal(process, signal.SIGINT)
                else:
                    # Exited on its own; its return code stands
                    self.logger.debug(f"Watcher resolved on {line!r}, process exited with {process.returncode}")
                if temp_file is not None:
                    temp_file.close()

            def writer_done() -> bool:
                return process.poll() is not None or verify_file_complete(target)

            watcher = Watcher(
                target,
                delay=request.settle_delay,
                timeout=request.timeout,
                poll_interval=request.poll_interval,
                logger=self.logger,
            )
            try:
                state = watcher.watch_for(
                    COMPLETION_PATTERN, on_match, abort_when=writer_done,
                    confirm=lambda: verify_file_complete(target),
                )
                if state is WatchState.STOPPED and process.poll() is None:
                    # Output completed before the watch began; the process is hung
                    self.logger.debug(f"Output already complete, interrupting process group {process.pid}")
                    terminated = self._signal(process, signal.SIGINT)
                self._reap(process)
            except BaseException:
                self.logger.warning(f"Killing process group {process.pid} after failed watch")
                self._signal(process, signal.SIGKILL)
                self._reap(process)
                raise

            stderr_file.seek(0)
            stderr = stderr_file.read().decode('utf-8', errors='replace')

        return ExecutionResult(
            output=self._read_output(target),
            returncode=process.returncode,
            terminated=terminated,
            stderr=stderr,
        )

    def _reap(self, process: subprocess.Popen) -> None:
        """Wait for the process, escalating to SIGKILL after the grace period."""
        try:
            process.wait(timeout=self.TERMINATION_GRACE)
        except subprocess.TimeoutExpired:
            self.logger.warning(f"Process group {process.pid} ignored SIGINT, killing it")
            self._signal(process, signal.SIGKILL)
            process.wait()

    @staticmethod
    def _signal(process: subprocess.Popen, sig: int) -> bool:
        """Send a signal to the whole process group; False if it is already gone."""
        try:
            os.killpg(process.pid, sig)
            return True
        except ProcessLookupError:
            return False

    @staticmethod
    def _read_output(path: str) -> bytes:
        if not os.path.exists(path):
            return b''
        with open(path, 'rb') as f:
            return f.read()
