import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional


def utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def new_run_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class RunLogger:
    """
    Append-only JSONL log of generation runs.

    Each call writes one JSON object per line to log_path, keyed by the
    product the operation touched. Batch items running concurrently share one
    logger; each line is written in a single call.
    """
    log_path: Path
    run_id: str = field(default_factory=new_run_id)

    def _write(self, payload: dict[str, Any]) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with self.log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")

    def start(self, operation: str, product_id: str, input: Any = None) -> None:
        self._write({
            "ts": utc_iso(),
            "run_id": self.run_id,
            "product_id": product_id,
            "operation": operation,
            "event": "start",
            "status": "ok",
            "input": input,
        })

    def end(self, operation: str, product_id: str, output: Any, metrics: Optional[dict[str, Any]] = None) -> None:
        self._write({
            "ts": utc_iso(),
            "run_id": self.run_id,
            "product_id": product_id,
            "operation": operation,
            "event": "end",
            "status": "ok",
            "output": output,
            "metrics": metrics or {},
        })

    def error(self, operation: str, product_id: str, err: Exception) -> None:
        self._write({
            "ts": utc_iso(),
            "run_id": self.run_id,
            "product_id": product_id,
            "operation": operation,
            "event": "error",
            "status": "error",
            "error": {
                "type": err.__class__.__name__,
                "message": str(err),
            }
        })

    def read(self) -> list[dict[str, Any]]:
        if not self.log_path.exists():
            return []
        lines = self.log_path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line.strip()]
