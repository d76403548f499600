import threading


class ArmingGuard:
    """Explicit not-yet-armed -> armed transition.

    `try_arm` is a compare-and-set: exactly one caller observes True no matter
    how many race for it. `disarm` hands the slot back when arming failed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    def try_arm(self) -> bool:
        with self._lock:
            if self._armed:
                return False
            self._armed = True
            return True

    def disarm(self) -> None:
        with self._lock:
            self._armed = False
