"""
Resolve logical output ids to note files confined to the configured vault.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from core.session import Destination
from core.settings import SettingsStore
from shared.errors import NoVaultConfigured, PathOutsideVault, UnknownDestination
from shared.path_template import expand_template


class OutputResolver:
    def __init__(self, settings_store: SettingsStore) -> None:
        self._settings_store = settings_store

    def resolve(self, destination: Destination | str, now: datetime) -> Path:
        """
        Expand the destination's path template against ``now`` and return the
        absolute file path inside the vault.

        Raises ``NoVaultConfigured`` when no vault is selected, ``UnknownDestination``
        for an id without a template and ``PathOutsideVault`` when the expanded
        path would land outside the vault root.
        """
        try:
            logical_id = Destination.parse(destination)
        except ValueError as exc:
            raise UnknownDestination(str(exc)) from exc
        if logical_id is None:
            raise UnknownDestination("No destination given.")

        vault_root = self._settings_store.get_vault_root()
        if vault_root is None:
            raise NoVaultConfigured()

        relative = expand_template(self._settings_store.get_output_template(logical_id), now)
        root = vault_root.resolve()
        target = (root / relative).resolve()
        if target == root or not target.is_relative_to(root):
            raise PathOutsideVault(target, root)
        return target
