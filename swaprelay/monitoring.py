# swaprelay/monitoring.py
from __future__ import annotations

import time
from typing import Any, Dict, List

from swaprelay.core.config import settings
from swaprelay.core.errors import StoreError


def _check(name: str, ok: bool, detail: str = "", extra: Dict[str, Any] | None = None) -> Dict[str, Any]:
    row: Dict[str, Any] = {"name": name, "ok": bool(ok)}
    if detail:
        row["detail"] = detail
    if extra:
        row["extra"] = extra
    return row


async def run_selftest(relay, quick: bool = True) -> dict:
    checks: List[Dict[str, Any]] = []

    # --- ENV sanity ---
    checks.append(_check("env:DATABASE_URL", bool(settings.DATABASE_URL)))
    checks.append(_check("env:HELIUS_API_KEY", bool(settings.HELIUS_API_KEY), detail="required for filter sync"))
    checks.append(_check("env:HELIUS_WEBHOOK_ID", bool(settings.HELIUS_WEBHOOK_ID), detail="required for filter sync"))
    checks.append(_check("env:BOT_TOKEN", True, detail="set" if settings.BOT_TOKEN else "optional (bot disabled if missing)"))

    # --- DB ---
    db_err = ""
    t0 = time.time()
    try:
        count = len(relay.store.list_distinct_addresses())
        db_ok = True
    except StoreError as e:
        db_ok = False
        count = 0
        db_err = e.message

    checks.append(
        _check(
            "db:subscriptions",
            db_ok,
            detail=db_err,
            extra={"ms": int((time.time() - t0) * 1000), "distinct_addresses": count},
        )
    )

    # --- Optional deeper checks (non-blocking for quick) ---
    if not quick:
        probe = getattr(relay.sync, "probe", None)
        if probe is None:
            checks.append(_check("helius:webhook", True, detail="skipped (sync backend has no probe)"))
        else:
            ok, detail = await probe()
            checks.append(_check("helius:webhook", ok, detail=detail))

    status = "ok" if all(c.get("ok") for c in checks) else "degraded"
    return {"status": status, "checks": checks}
