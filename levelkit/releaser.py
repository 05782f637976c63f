"""Releasable resources and a basic releaser chain."""

from __future__ import annotations

from typing import Optional, Protocol


class Releaser(Protocol):
    def release(self) -> None: ...


class ReleasedError(RuntimeError):
    """The resource has already been released."""

    def __init__(self, message: str = "resource already released") -> None:
        super().__init__(message)


class HasReleaserError(RuntimeError):
    """A releaser is already attached to the resource."""

    def __init__(self, message: str = "releaser already defined") -> None:
        super().__init__(message)


class BasicReleaser:
    """Tracks release state and forwards release to an optional attached releaser."""

    def __init__(self) -> None:
        self._releaser: Optional[Releaser] = None
        self._released = False

    @property
    def released(self) -> bool:
        """Whether release() has been called."""
        return self._released

    def release(self) -> None:
        """Release the resource; later calls do nothing."""
        if self._released:
            return
        if self._releaser is not None:
            self._releaser.release()
            self._releaser = None
        self._released = True

    def set_releaser(self, releaser: Optional[Releaser]) -> None:
        """Attach ``releaser``, or detach the current one with ``None``."""
        if self._released:
            raise ReleasedError()
        if self._releaser is not None and releaser is not None:
            raise HasReleaserError()
        self._releaser = releaser

    def __enter__(self) -> "BasicReleaser":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class NoopReleaser:
    """A releaser that frees nothing; it only notes that it was released."""

    def __init__(self) -> None:
        self.released = False

    def release(self) -> None:
        """Mark as released; safe to call any number of times."""
        self.released = True