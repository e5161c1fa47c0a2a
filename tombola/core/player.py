"""Playback backends: play(ref, on_complete, on_error) and stop(ref).

Exactly one of on_complete / on_error is called per play(), once, from a
worker thread.
"""
import logging
import shlex
import subprocess
import threading
from typing import Callable, Optional

from tombola.config import PLAYER_COMMAND, SIMULATE_PLAYBACK, SIMULATED_CLIP_SEC
from tombola.models.entry import MediaRef

logger = logging.getLogger(__name__)

OnComplete = Callable[[], None]
OnError = Callable[[str], None]


class _Once:
    """Guards a pair of callbacks so only the first report goes through."""

    def __init__(self, on_complete: OnComplete, on_error: OnError) -> None:
        self._on_complete = on_complete
        self._on_error = on_error
        self._fired = False
        self._lock = threading.Lock()

    def _claim(self) -> bool:
        with self._lock:
            if self._fired:
                return False
            self._fired = True
            return True

    def complete(self) -> None:
        if self._claim():
            self._on_complete()

    def error(self, reason: str) -> None:
        if self._claim():
            self._on_error(reason)


class _Request:
    """One play() call: its clip, its report and, once started, its process."""

    def __init__(self, ref: MediaRef, report: _Once) -> None:
        self.ref = ref
        self.report = report
        self.proc: Optional[subprocess.Popen] = None
        self.cancelled = False


class SubprocessPlayer:
    """Plays a file by running a command line player (ffplay, afplay, mpg123...).

    The request is recorded before play() returns, so a stop() issued before
    the process exists still cancels it. A new play() cancels the previous one.
    """

    def __init__(self, command: str = PLAYER_COMMAND, kill_after_sec: float = 2.0) -> None:
        self._argv = shlex.split(command)
        if not self._argv:
            raise ValueError("player command must not be empty")
        self._kill_after_sec = kill_after_sec
        self._lock = threading.Lock()
        self._current: Optional[_Request] = None

    def play(self, ref: MediaRef, on_complete: OnComplete, on_error: OnError) -> None:
        """Start playback in a worker thread; callbacks fire when the player exits."""
        request = _Request(ref, _Once(on_complete, on_error))
        with self._lock:
            previous, self._current = self._current, request
        if previous is not None:
            self._cancel(previous)
        thread = threading.Thread(target=self._run, args=(request,), daemon=True)
        thread.start()

    def _run(self, request: _Request) -> None:
        argv = self._argv + [request.ref.path]
        with self._lock:
            if request.cancelled:
                request.report.error("stopped")
                return
        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            logger.warning("Player: cannot start %s: %s", argv[0], e)
            self._finish(request)
            request.report.error(str(e))
            return
        with self._lock:
            request.proc = proc
            cancelled = request.cancelled
        if cancelled:
            self._terminate(proc)
        _, stderr = proc.communicate()
        self._finish(request)
        if request.cancelled:
            request.report.error("stopped")
            return
        if proc.returncode == 0:
            request.report.complete()
            return
        detail = (stderr or b"").decode(errors="replace").strip()
        reason = f"player exited with {proc.returncode}" + (f": {detail}" if detail else "")
        logger.warning("Player: %s (%s)", reason, request.ref.filename)
        request.report.error(reason)

    def _finish(self, request: _Request) -> None:
        with self._lock:
            if self._current is request:
                self._current = None

    def stop(self, ref: Optional[MediaRef] = None) -> None:
        """Cancel the current clip, started or not; ref=None stops whatever is playing."""
        with self._lock:
            request = self._current
            if request is None or (ref is not None and request.ref != ref):
                return
            self._current = None
        self._cancel(request)

    def _cancel(self, request: _Request) -> None:
        with self._lock:
            request.cancelled = True
            proc = request.proc
        if proc is not None:
            self._terminate(proc)

    def _terminate(self, proc: subprocess.Popen) -> None:
        """Send SIGTERM and return; a reaper thread kills the player if it lingers."""
        try:
            proc.terminate()
        except OSError as e:
            logger.warning("Player: stop failed: %s", e)
            return
        reaper = threading.Thread(target=self._reap, args=(proc,), daemon=True)
        reaper.start()

    def _reap(self, proc: subprocess.Popen) -> None:
        try:
            proc.wait(timeout=self._kill_after_sec)
        except subprocess.TimeoutExpired:
            logger.warning("Player: did not exit after SIGTERM, killing")
            proc.kill()


class SimulatedPlayer:
    """For development: pretends every clip lasts clip_sec seconds."""

    def __init__(self, clip_sec: float = SIMULATED_CLIP_SEC) -> None:
        self._clip_sec = clip_sec
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._report: Optional[_Once] = None
        self._ref: Optional[MediaRef] = None

    def play(self, ref: MediaRef, on_complete: OnComplete, on_error: OnError) -> None:
        report = _Once(on_complete, on_error)
        timer = threading.Timer(self._clip_sec, report.complete)
        timer.daemon = True
        with self._lock:
            self._timer, self._report, self._ref = timer, report, ref
        logger.info("Simulated playback: %s (%.1fs)", ref.filename, self._clip_sec)
        timer.start()

    def stop(self, ref: Optional[MediaRef] = None) -> None:
        with self._lock:
            if self._timer is None or (ref is not None and self._ref != ref):
                return
            timer, report = self._timer, self._report
            self._timer = self._report = self._ref = None
        timer.cancel()
        report.error("stopped")


def get_player(simulate: bool = SIMULATE_PLAYBACK):
    """Return the configured playback backend."""
    if simulate:
        logger.info("Playback: simulated (TOMBOLA_SIMULATE_PLAYBACK=1)")
        return SimulatedPlayer()
    return SubprocessPlayer()
