## Copyright (C) 2012-2013  Daniel Pavel
## Copyright (C) 2014-2024  Solaar Contributors https://pwr-solaar.github.io/Solaar/
##
## This program is free software; you can redistribute it and/or modify
## it under the terms of the GNU General Public License as published by
## the Free Software Foundation; either version 2 of the License, or
## (at your option) any later version.
##
## This program is distributed in the hope that it will be useful,
## but WITHOUT ANY WARRANTY; without even the implied warranty of
## MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
## GNU General Public License for more details.
##
## You should have received a copy of the GNU General Public License along
## with this program; if not, write to the Free Software Foundation, Inc.,
## 51 Franklin Street, Fifth Floor, Boston, MA 02110-1301 USA.

"""Retrying access to a HID device handle.

USB and wireless HID links drop out now and then. Opening and writing are
retried with a fixed delay, and a failed write reconnects before trying again.
Reads are never retried here; callers decide what a timeout means.
"""

from __future__ import annotations

import dataclasses
import errno
import logging

from enum import Enum
from time import sleep
from typing import Any
from typing import Callable
from typing import Optional

from typing_extensions import Protocol

from . import common
from . import exceptions
from .base import SHORT_MESSAGE_SIZE

logger = logging.getLogger(__name__)

# delays and timeouts are in milliseconds
OPEN_DELAY = 10
OPEN_RETRIES = 5
WRITE_DELAY = 1
WRITE_RETRIES = 5
READ_TIMEOUT = 100


class LowLevelInterface(Protocol):
    def open(self, vendor_id: int, product_id: int):
        ...

    def write(self, device_handle, data: bytes) -> int:
        ...

    def read(self, device_handle, bytes_count: int, timeout_ms: int) -> bytes:
        ...

    def close(self, device_handle) -> None:
        ...


class Outcome(Enum):
    OK = "ok"
    RETRY = "retry"
    FAIL = "fail"


@dataclasses.dataclass
class Attempt:
    outcome: Outcome
    value: Any = None
    reason: Any = None

    @classmethod
    def ok(cls, value=None) -> Attempt:
        return cls(Outcome.OK, value=value)

    @classmethod
    def retry(cls, reason) -> Attempt:
        return cls(Outcome.RETRY, reason=reason)

    @classmethod
    def fail(cls, reason) -> Attempt:
        return cls(Outcome.FAIL, reason=reason)


@dataclasses.dataclass(frozen=True)
class RetryPolicy:
    """Runs an operation until it succeeds, fails, or has been retried ``max_retries`` times.

    The operation receives the attempt number, starting at 1, and returns an
    ``Attempt``. Between attempts the policy waits ``delay`` milliseconds and
    then calls ``before_retry``, if given.
    """

    delay: int
    max_retries: int

    def run(self, operation: Callable[[int], Attempt], before_retry: Optional[Callable[[], None]] = None):
        attempt = 0
        while True:
            attempt += 1
            result = operation(attempt)
            if result.outcome is Outcome.OK:
                return result.value
            if result.outcome is Outcome.FAIL or attempt > self.max_retries:
                raise exceptions.RetryError(attempts=attempt, reason=result.reason)
            sleep(self.delay / 1000.0)
            if before_retry is not None:
                before_retry()


DEFAULT_OPEN_POLICY = RetryPolicy(OPEN_DELAY, OPEN_RETRIES)
DEFAULT_WRITE_POLICY = RetryPolicy(WRITE_DELAY, WRITE_RETRIES)


class RetryingTransport:
    """Owns the one open handle to a HID device."""

    def __init__(
        self,
        low_level: LowLevelInterface,
        vendor_id: int,
        product_id: int,
        open_policy: RetryPolicy = DEFAULT_OPEN_POLICY,
        write_policy: RetryPolicy = DEFAULT_WRITE_POLICY,
        read_timeout: int = READ_TIMEOUT,
    ):
        self.low_level = low_level
        self.vendor_id = vendor_id
        self.product_id = product_id
        self.open_policy = open_policy
        self.write_policy = write_policy
        self.read_timeout = read_timeout
        self.handle = None

    def _open_attempt(self, attempt: int) -> Attempt:
        try:
            handle = self.low_level.open(self.vendor_id, self.product_id)
        except OSError as e:
            if e.errno == errno.EACCES:
                logger.error("no permission to open device %04X:%04X", self.vendor_id, self.product_id)
                return Attempt.fail(e)
            logger.debug("error opening device %04X:%04X (attempt %d): %s", self.vendor_id, self.product_id, attempt, e)
            return Attempt.retry(e)
        except Exception as e:
            logger.debug("error opening device %04X:%04X (attempt %d): %s", self.vendor_id, self.product_id, attempt, e)
            return Attempt.retry(e)
        if not handle:
            logger.debug("no handle for device %04X:%04X (attempt %d)", self.vendor_id, self.product_id, attempt)
            return Attempt.retry("no device handle")
        return Attempt.ok(handle)

    def open(self):
        """Opens the device, replacing any handle already held.

        :raises TransportOpenFailure: once the open policy gives up.
        """
        self.close()
        try:
            handle = self.open_policy.run(self._open_attempt)
        except exceptions.RetryError as e:
            logger.debug("giving up opening device %04X:%04X after %d attempts", self.vendor_id, self.product_id, e.attempts)
            raise exceptions.TransportOpenFailure(
                vendor_id=self.vendor_id,
                product_id=self.product_id,
                attempts=e.attempts,
                reason=e.reason,
            ) from None
        if logger.isEnabledFor(logging.INFO):
            logger.info("opened device %04X:%04X as handle %r", self.vendor_id, self.product_id, handle)
        self.handle = handle
        return handle

    def close(self):
        """Closes the handle, if any. Never raises."""
        handle, self.handle = self.handle, None
        if handle is None:
            return False
        try:
            self.low_level.close(handle)
            return True
        except Exception as e:
            logger.warning("failed to close handle %r: %s", handle, e)
            return False

    def reconnect(self):
        if logger.isEnabledFor(logging.INFO):
            logger.info("reconnecting to device %04X:%04X", self.vendor_id, self.product_id)
        return self.open()

    def write(self, data: bytes):
        """Writes a full report, reconnecting before each retry.

        :raises TransportWriteFailure: once the write policy gives up.
        :raises TransportOpenFailure: if a reconnect fails.
        """
        assert isinstance(data, bytes), (repr(data), type(data))

        def _write_attempt(attempt: int) -> Attempt:
            if self.handle is None:
                return Attempt.retry("device handle not open")
            try:
                self.low_level.write(self.handle, data)
            except Exception as e:
                logger.debug("(%s) write failed (attempt %d): %s", self.handle, attempt, e)
                return Attempt.retry(e)
            return Attempt.ok()

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "(%s) <= w[%02X %02X %s %s]", self.handle, data[0], data[1], common.strhex(data[2:4]), common.strhex(data[4:])
            )
        try:
            self.write_policy.run(_write_attempt, before_retry=self.reconnect)
        except exceptions.RetryError as e:
            logger.error("(%s) giving up writing after %d attempts: %s", self.handle, e.attempts, e.reason)
            raise exceptions.TransportWriteFailure(attempts=e.attempts, reason=e.reason) from None

    def read(self, bytes_count: int = SHORT_MESSAGE_SIZE) -> bytes:
        """Reads exactly one report of ``bytes_count`` bytes, waiting at most ``read_timeout`` milliseconds.

        :raises TransportReadTimeout: if nothing, or not enough, arrived in time.
        """
        if self.handle is None:
            raise exceptions.TransportReadTimeout(
                expected=bytes_count, received=b"", timeout=self.read_timeout, reason="device handle not open"
            )
        try:
            data = self.low_level.read(self.handle, bytes_count, self.read_timeout)
        except Exception as e:
            logger.warning("(%s) read failed: %s", self.handle, e)
            raise exceptions.TransportReadTimeout(
                expected=bytes_count, received=b"", timeout=self.read_timeout, reason=e
            ) from e
        data = bytes(data or b"")
        if len(data) < bytes_count:
            logger.warning("(%s) timeout (%d ms) reading reply, got [%s]", self.handle, self.read_timeout, common.strhex(data))
            raise exceptions.TransportReadTimeout(expected=bytes_count, received=data, timeout=self.read_timeout, reason=None)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "(%s) => r[%02X %02X %s %s]", self.handle, data[0], data[1], common.strhex(data[2:4]), common.strhex(data[4:])
            )
        return data

    def transfer(self, data: bytes) -> bytes:
        """Writes a request report and reads the single short reply report."""
        self.write(data)
        return self.read(SHORT_MESSAGE_SIZE)
