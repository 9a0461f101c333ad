"""Screen capture via mss.

Supplies live target buffers for matching. One mss handle is kept per thread
since mss instances must not be shared across threads.
"""
from __future__ import annotations

from typing import Optional
import logging
import threading
import time

import mss
import numpy as np

from ..config.vision import PERF_ENABLED
from ..vision.region import MatchRegion

logger = logging.getLogger(__name__)


class ScreenCapture:
    def __init__(self, monitor: int = 1) -> None:
        self.monitor = int(monitor)
        self._tls = threading.local()

    def _get_sct(self, force_new: bool = False):
        sct = getattr(self._tls, "sct", None)
        if force_new or sct is None:
            if sct is not None:
                sct.close()
            sct = mss.mss()
            self._tls.sct = sct
        return sct

    def _safe_grab(self, region: dict):
        sct = self._get_sct()
        try:
            return sct.grab(region)
        except AttributeError:
            # Stale handle (e.g. after a display change); retry once with a fresh one
            sct = self._get_sct(force_new=True)
            return sct.grab(region)

    def monitor_region(self) -> dict:
        return dict(self._get_sct().monitors[self.monitor])

    def grab(self, region: Optional[MatchRegion] = None) -> np.ndarray:
        """Capture a BGR frame of region (absolute screen pixels) or the whole monitor."""
        box = region.as_mss() if region is not None else self.monitor_region()
        t0 = time.perf_counter()
        frame = np.array(self._safe_grab(box))  # BGRA
        if PERF_ENABLED or logger.isEnabledFor(logging.DEBUG):
            logger.debug("capture: grab %.1fms region=%s", (time.perf_counter() - t0) * 1000.0, box)
        return np.ascontiguousarray(frame[:, :, :3])

    def close(self) -> None:
        sct = getattr(self._tls, "sct", None)
        if sct is not None:
            sct.close()
            self._tls.sct = None
