"""
keyload.profiling
-----------------
Signal-driven profiling for long loads.

Each delivery of the toggle signal (SIGUSR2 by default) does two things:

- flips CPU profiling: stops and writes the running profile, or starts a new
  one when CPU profiling is enabled
- writes a tracemalloc snapshot to a fixed path when memory profiling is
  enabled

The signal handler only queues the delivery. A single daemon thread owns the
ProfilingState and handles deliveries one at a time, in arrival order.

CPU profiles are marshalled pstats data (``pstats.Stats(path)``); memory
snapshots load with ``tracemalloc.Snapshot.load(path)``. cProfile sits on
sys.monitoring, so a profiler enabled from the listener thread sees every
thread in the process.
"""

from __future__ import annotations
from typing import BinaryIO, Optional, Union
import cProfile, marshal, queue, signal, threading, tracemalloc
from keyload.logger import get_logger
from keyload.utils import file_ts

log = get_logger("keyload.profiling")


class ProfilingState:
    def __init__(self, cpu_enabled: bool = False, mem_enabled: bool = False,
                 cpu_prefix: str = "keyload", mem_path: str = "keyload.mprof"):
        self.cpu_enabled = cpu_enabled
        self.mem_enabled = mem_enabled
        self.cpu_prefix = cpu_prefix
        self.mem_path = mem_path
        self.cpu_path: Optional[str] = None
        self.cpu_runs = 0
        self._profiler: Optional[cProfile.Profile] = None
        self._cpu_file: Optional[BinaryIO] = None

        if mem_enabled and not tracemalloc.is_tracing():
            tracemalloc.start()

    @property
    def capturing(self) -> bool:
        return self._profiler is not None

    def toggle_cpu(self) -> bool:
        """Flip CPU capture. Returns True when capturing afterwards."""
        if self._profiler is not None:
            self._stop_cpu()
            return False
        if not self.cpu_enabled:
            log.debug("[PROF] cpu profiling disabled, toggle ignored")
            return False
        return self._start_cpu()

    def _start_cpu(self) -> bool:
        path = f"{self.cpu_prefix}.{file_ts()}.{self.cpu_runs + 1}.cpuprof"
        try:
            f = open(path, "wb")
        except OSError as e:
            log.error(f"[PROF] cannot open cpu profile {path!r}: {e}")
            return False

        profiler = cProfile.Profile()
        try:
            profiler.enable()
        except ValueError as e:
            # another profiler already owns sys.monitoring
            f.close()
            log.error(f"[PROF] cannot start cpu profiler: {e}")
            return False

        self._profiler, self._cpu_file, self.cpu_path = profiler, f, path
        self.cpu_runs += 1
        log.info(f"[PROF] cpu profiling started path={path}")
        return True

    def _stop_cpu(self) -> None:
        profiler, f, path = self._profiler, self._cpu_file, self.cpu_path
        self._profiler, self._cpu_file = None, None

        profiler.disable()
        try:
            profiler.create_stats()
            marshal.dump(profiler.stats, f)
        except (OSError, ValueError) as e:
            log.error(f"[PROF] failed to write cpu profile {path!r}: {e}")
        else:
            log.info(f"[PROF] cpu profiling stopped path={path}")
        finally:
            f.close()

    def write_mem_snapshot(self) -> Optional[str]:
        """Dump a tracemalloc snapshot to mem_path. Returns the path written."""
        if not self.mem_enabled:
            return None
        try:
            tracemalloc.take_snapshot().dump(self.mem_path)
        except (OSError, RuntimeError) as e:
            log.error(f"[PROF] failed to write memory profile {self.mem_path!r}: {e}")
            return None
        log.info(f"[PROF] memory profile written path={self.mem_path}")
        return self.mem_path

    def on_signal(self) -> None:
        self.toggle_cpu()
        self.write_mem_snapshot()


class ProfilingToggle:
    """
    Listener that feeds signal deliveries to a ProfilingState.

    start() must run on the main thread (Python only installs signal
    handlers there). There is no stop: the listener is a daemon thread and
    ends with the process.
    """

    def __init__(self, state: ProfilingState, signum: Optional[int] = None):
        self.state = state
        self.signum = signum if signum is not None else signal.SIGUSR2
        # SimpleQueue.put is reentrant, so a delivery may interrupt another one
        self._queue: "queue.SimpleQueue[Union[int, threading.Event]]" = queue.SimpleQueue()
        self.handled = 0
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        signal.signal(self.signum, self.notify)
        self._thread = threading.Thread(target=self._run, name="profiling-toggle", daemon=True)
        self._thread.start()
        log.info(f"[PROF] listening for signal {signal.Signals(self.signum).name}")

    def notify(self, signum: int, frame=None) -> None:
        self._queue.put(signum)

    def join(self, timeout: Optional[float] = None) -> bool:
        """Block until every delivery queued so far has been handled."""
        done = threading.Event()
        self._queue.put(done)
        return done.wait(timeout)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if isinstance(item, threading.Event):
                item.set()
                continue
            try:
                self.state.on_signal()
            except Exception:
                log.exception("[PROF] toggle failed")
            self.handled += 1
