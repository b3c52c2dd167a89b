"""Deploy-time workaround for the legacy ``snc`` toolchain.

With node 12.16.1 the old ui-component deploy rejects ``now-ui.json`` files
that declare ``actions`` on a component. While such a deploy runs, the live
registry is swapped for a copy with every ``actions`` list emptied and the
original bytes are kept in ``now-ui-backup.json`` until they are put back.

States: ``UNMODIFIED -> SHIMMED -> RESTORED``. ``applied()`` guarantees a
restore attempt on every exit path; if the restore itself fails the backup
file is left on disk and ``recover()`` can finish the job later.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path

from yala.errors import IOFailure, NotFoundError
from yala.registry.store import load_registry, save_registry


class ShimState(str, Enum):
    UNMODIFIED = "unmodified"
    SHIMMED = "shimmed"
    RESTORED = "restored"


class DeployShim:
    """Backs up the registry, strips component actions, and restores it."""

    def __init__(self, registry_path: str | Path, backup_path: str | Path) -> None:
        self.registry_path = Path(registry_path)
        self.backup_path = Path(backup_path)
        self.state = ShimState.UNMODIFIED

    def engage(self) -> None:
        """Back up the registry byte for byte, then clear every ``actions`` list."""
        if self.state is not ShimState.UNMODIFIED:
            raise RuntimeError(f"Cannot engage shim from state {self.state.value}")

        doc = load_registry(self.registry_path)
        try:
            self.backup_path.write_bytes(self.registry_path.read_bytes())
        except OSError as exc:
            raise IOFailure(f"Unable to back up {self.registry_path}: {exc}") from exc

        for component in doc.components.values():
            component.actions = []
        self.state = ShimState.SHIMMED
        save_registry(self.registry_path, doc)

    def restore(self) -> None:
        """Put the backed-up bytes back and delete the backup."""
        if self.state is not ShimState.SHIMMED:
            raise RuntimeError(f"Cannot restore shim from state {self.state.value}")
        self._copy_back()
        self.state = ShimState.RESTORED

    def recover(self) -> bool:
        """Restore from a backup left behind by an interrupted run.

        Returns:
            ``True`` if a backup was found and restored.
        """
        if not self.backup_path.exists():
            return False
        self._copy_back()
        self.state = ShimState.RESTORED
        return True

    @contextmanager
    def applied(self, enabled: bool = True) -> Iterator["DeployShim"]:
        """Engage the shim for the duration of the ``with`` block.

        When *enabled* is false nothing happens and the state stays
        ``UNMODIFIED``. Otherwise the registry is restored when the block
        exits, whether it returns normally or raises.
        """
        if not enabled:
            yield self
            return

        self.engage()
        try:
            yield self
        finally:
            self.restore()

    def _copy_back(self) -> None:
        if not self.backup_path.exists():
            raise NotFoundError(f"Registry backup not found: {self.backup_path}")
        try:
            self.registry_path.write_bytes(self.backup_path.read_bytes())
            self.backup_path.unlink()
        except OSError as exc:
            raise IOFailure(
                f"Unable to restore {self.registry_path} from {self.backup_path}: {exc}. "
                "The backup has been kept; copy it over now-ui.json by hand."
            ) from exc
