# src/refields/session.py
import logging
from typing import Any, Callable

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.support.ui import WebDriverWait

from .driver import create_driver
from .instrumentation import Cat, Counters, InstrumentPolicy, LogMode, RateLimiter, format_ctx
from . import config


class FormSession:
    """
    Logging/instrumentation sink shared by the registry, the binder and the entry
    point, plus the (lazily created) browser driver the binder reads fields from.
    """

    def __init__(
        self,
        logger=None,
        *,
        driver=None,
        mode: LogMode | None = None,
        driver_factory: Callable[[], Any] = create_driver,
    ):
        self.logger = logger or logging.getLogger("refields")
        self._driver = driver
        self._driver_factory = driver_factory

        if mode is None:
            mode = LogMode(config.LOG_MODE) if config.LOG_MODE in ("live", "debug", "trace") else LogMode.LIVE

        self.instr_policy = InstrumentPolicy(
            mode=mode,
            include_ctx=True,
            rate_limits_s=getattr(config, "LOG_RATE_LIMITS_S", {}) or {},
        )
        self.counters = Counters()
        self._rate = RateLimiter()
        self.emit_signal(
            Cat.STARTUP,
            "Session initialized",
            kind="startup",
            log_mode=mode.value,
        )

    @property
    def driver(self):
        if self._driver is None:
            self._driver = self._driver_factory()
            self.emit_signal(Cat.STARTUP, "Browser driver created", kind="startup")
        return self._driver

    def has_driver(self) -> bool:
        return self._driver is not None

    def get_wait(self, timeout: float | None = None) -> WebDriverWait:
        """
        Return a WebDriverWait on the session driver.

        - If timeout is None: use the configured WAIT_TIME.
        - If timeout is provided: use that timeout instead.
        """
        return WebDriverWait(self.driver, config.WAIT_TIME if timeout is None else timeout)

    def open(self, url: str) -> None:
        self.emit_signal(Cat.NAV, f"Opening form page {url}", kind="open")
        self.driver.get(url)

    def close(self) -> None:
        if not self.has_driver():
            return
        try:
            self._driver.quit()
        except WebDriverException as e:
            self.emit_signal(Cat.NAV, f"Driver quit failed: {e!r}", level="warning", kind="close")
        finally:
            self._driver = None

    def emit_signal(self, cat: Cat, msg: str, *, level: str | int = "info", **ctx):
        # always allowed
        prefix = f"[{cat}]"
        if self.instr_policy.include_ctx:
            c = format_ctx(**ctx)
            if c:
                msg = f"{msg} :: {c}"
        if isinstance(level, int):
            self.logger.log(level, f"{prefix} {msg}")
            return
        lvl = (level or "info").lower()
        if lvl in ("warn", "warning"):
            self.logger.warning(f"{prefix} {msg}")
        elif lvl in ("error", "err", "critical", "fatal"):
            self.logger.error(f"{prefix} {msg}")
        elif lvl in ("debug", "trace"):
            self.logger.debug(f"{prefix} {msg}")
        else:
            self.logger.info(f"{prefix} {msg}")

    def emit_diag(self, cat: Cat, msg: str, *, key: str | None = None, every_s: float | None = None, **ctx):
        # gated by mode; DEBUG+ only
        if self.instr_policy.mode == LogMode.LIVE:
            return
        if key:
            every_s = every_s if every_s is not None else self.instr_policy.rate_limits_s.get(key)
            if every_s and not self._rate.allow(key, every_s):
                return

        prefix = f"[{cat}]"
        if self.instr_policy.include_ctx:
            c = format_ctx(**ctx)
            if c:
                msg = f"{msg} :: {c}"
        self.logger.debug(f"{prefix} {msg}")

    def emit_trace(self, cat: Cat, msg: str, *, key: str | None = None, every_s: float | None = None, **ctx):
        if self.instr_policy.mode != LogMode.TRACE:
            return
        if key and every_s:
            if not self._rate.allow(key, every_s):
                return

        prefix = f"[{cat}]"
        if self.instr_policy.include_ctx:
            c = format_ctx(**ctx)
            if c:
                msg = f"{msg} :: {c}"
        self.logger.debug(f"{prefix} {msg}")
