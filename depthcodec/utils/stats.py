import threading
import time
import numpy as np
from typing import Dict, List, Any


def _summarize(values: List[float]) -> Dict[str, float] | None:
    if not values:
        return None
    arr = np.asarray(values, dtype=np.float64)
    low, mid, high = np.percentile(arr, [0, 50, 95])
    return {"min": float(low), "p50": float(mid), "p95": float(high), "max": float(arr.max()), "count": int(arr.size)}


class CodecStats:
    """Timing and compression-ratio samples for codec calls, safe across threads."""

    def __init__(self):
        self._lock = threading.Lock()
        self._clear(time.time())

    def _clear(self, since: float):
        self._since = since
        self._encode_s: List[float] = []
        self._decode_s: List[float] = []
        self._ratios: List[float] = []
        self._encoded = 0
        self._dropped = 0
        self._decode_errors = 0

    def record_encode(self, elapsed_s: float, raw_bytes: int, payload_bytes: int | None):
        """``payload_bytes`` is None when the encoder produced nothing."""
        with self._lock:
            self._encode_s.append(elapsed_s)
            if payload_bytes is None:
                self._dropped += 1
            else:
                self._encoded += 1
                if payload_bytes:
                    self._ratios.append(raw_bytes / payload_bytes)

    def record_decode(self, elapsed_s: float):
        with self._lock:
            self._decode_s.append(elapsed_s)

    def record_decode_error(self):
        with self._lock:
            self._decode_errors += 1

    def snapshot(self, reset: bool = False) -> Dict[str, Any]:
        with self._lock:
            now = time.time()
            window_s = now - self._since
            report: Dict[str, Any] = {
                "window_s": window_s,
                "encoded": self._encoded,
                "encode_dropped": self._dropped,
                "decoded": len(self._decode_s),
                "decode_errors": self._decode_errors,
                "encode_s": _summarize(self._encode_s),
                "decode_s": _summarize(self._decode_s),
                "ratio": _summarize(self._ratios),
            }
            if report["ratio"] is not None:
                report["ratio"]["mean"] = float(np.mean(self._ratios))
            if reset:
                self._clear(now)
            return report
