"""Windows version oracle."""

from __future__ import annotations

import logging
import platform
import sys

from tweakhub.shared.models import WINDOWS_11_MIN_BUILD

logger = logging.getLogger(__name__)


class SystemWindowsVersion:
    """Reads the running OS build once and answers version questions from it.

    On non-Windows hosts the build is reported as 0, which makes every
    build-bounded setting incompatible and every unconstrained one visible.
    """

    def __init__(self):
        self._build: int | None = None

    def build_number(self) -> int:
        if self._build is None:
            self._build = self._detect_build()
        return self._build

    def is_windows11(self) -> bool:
        return self.build_number() >= WINDOWS_11_MIN_BUILD

    def _detect_build(self) -> int:
        getwindowsversion = getattr(sys, "getwindowsversion", None)
        if getwindowsversion is not None:
            return getwindowsversion().build
        if platform.system() == "Windows":
            # "10.0.22631"
            try:
                return int(platform.version().split(".")[-1])
            except ValueError:
                logger.warning("Could not parse Windows version %r", platform.version())
                return 0
        logger.debug("Not a Windows host (%s), reporting build 0", platform.system())
        return 0
