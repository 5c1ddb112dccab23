#!/usr/bin/env python3
"""Import / Export — Coordinating Operations with an Admission Policy.

================================================================================
WHY A MANAGER?
================================================================================

An application that imports and exports data has a rule: an import rewrites
the store, so nothing else may run while it is in flight. Several exports
may run side by side.

Neither operation can enforce that rule alone. The manager owns it::

    ExclusiveManager(["import", "export"], exclusive=["import"])

    export #1  ──► ACCEPT ─► RUN ─────────────── DONE ─► RELEASE
    import     ──► REFUSE ("not processable")        (export #1 active)
    export #2  ──► ACCEPT ─► RUN ──────────── DONE ─► RELEASE
    import     ──► ACCEPT ─► RUN ─► DONE ─► RELEASE  (store idle again)


================================================================================
RUN
================================================================================

    python examples/import_export.py
"""

from opmanager import AbstractOperation, ExclusiveManager
from opmanager.core.logging import configure_logging


class ExportOperation(AbstractOperation):
    kind = "export"

    def __init__(self, manager, target):
        super().__init__(manager)
        self.target = target
        self._done = None

    def _process(self, done):
        # Finished later by the caller, as a slow export would be.
        self._done = done

    def finish(self):
        self._done(f"exported to {self.target}")


class ImportOperation(AbstractOperation):
    kind = "import"

    def __init__(self, manager, rows):
        super().__init__(manager)
        self.rows = rows

    def _process(self, done):
        done(len(self.rows))


def main():
    configure_logging(level="WARNING")

    print("=" * 60)
    print("Import / Export with ExclusiveManager")
    print("=" * 60)

    manager = ExclusiveManager(["import", "export"], exclusive=["import"])
    manager.on_accept(lambda op: print(f"  accept   {op!r}"))
    manager.on_refuse(lambda op, reason: print(f"  refuse   {op!r}: {reason}"))
    manager.on_done(lambda op, *result: print(f"  done     {op!r} -> {result}"))
    manager.on_release(lambda op: print(f"  release  {op!r}"))

    # === 1. A slow export is running ===
    print("\n[1] Slow export")
    slow = ExportOperation(manager, "s3://bucket/a.csv")
    slow.request()

    # === 2. An import is refused while it runs ===
    print("\n[2] Import while exporting")
    blocked = ImportOperation(manager, rows=[1, 2, 3])
    blocked.request()

    # === 3. Exports share the store ===
    print("\n[3] Second export")
    second = ExportOperation(manager, "s3://bucket/b.csv")
    second.request()
    print(f"  active: {manager.operations}")

    # === 4. Once the store is idle, a fresh import is admitted ===
    print("\n[4] Finish both exports, import again")
    slow.finish()
    second.finish()
    ImportOperation(manager, rows=[1, 2, 3]).request()
    print(f"  active: {manager.operations}")

    print("\n" + "=" * 60)
    print("[OK] Import / Export Complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
