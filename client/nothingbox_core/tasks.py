"""
BackgroundTasks — run blocking calls off the Tk thread, finish them on it.

Workers never touch session state or widgets. They push (callback, result,
error) onto a queue; drain() runs the callbacks in order on the main thread.
"""

import queue
import threading

from .config import log


class BackgroundTasks:

    def __init__(self):
        self._done = queue.Queue()

    def submit(self, fn, on_done=None, name="task"):
        """Run fn() on a daemon thread. on_done(result, error) runs later in drain()."""
        def worker():
            result, error = None, None
            try:
                result = fn()
            except Exception as e:
                error = e
            self._done.put((on_done, result, error, name))

        threading.Thread(target=worker, name=name, daemon=True).start()

    def drain(self, limit=50):
        """Run queued completions. Call from the main thread. Returns how many ran."""
        ran = 0
        while ran < limit:
            try:
                on_done, result, error, name = self._done.get_nowait()
            except queue.Empty:
                break
            ran += 1
            if on_done is None:
                if error is not None:
                    log.warning("Background %s failed: %s", name, error)
                continue
            try:
                on_done(result, error)
            except Exception as e:
                log.error("Completion for %s raised: %s", name, e, exc_info=True)
        return ran
