"""
TCP port checker.

Opens a raw TCP connection to 127.0.0.1 with a timeout. No data is sent or
read; the connection is closed right after the handshake.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from ..config import PortConfig
from ..core.base_checker import BaseChecker, DEFAULT_CHECKER_TIMEOUT_SECONDS, timed_check
from ..core.models import CheckResult, Outcome

logger = logging.getLogger(__name__)

DEFAULT_PORT_TIMEOUT_MS = 3000
LOOPBACK_HOST = "127.0.0.1"


async def probe_port(port: int, timeout_ms: int = DEFAULT_PORT_TIMEOUT_MS, host: str = LOOPBACK_HOST) -> bool:
    """
    Проверить, принимает ли порт соединения.

    Таймаут и отказ в соединении дают False, а не исключение.
    """
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout_ms / 1000,
        )
    except asyncio.TimeoutError:
        logger.debug(f"Port {port}: no answer within {timeout_ms}ms")
        return False
    except OSError as e:
        logger.debug(f"Port {port}: {e.strerror or e}")
        return False

    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        pass
    return True


class PortsChecker(BaseChecker):
    """Проверка, что сервисы слушают свои порты на localhost."""

    def __init__(
        self,
        ports: Sequence[PortConfig],
        timeout_ms: int = DEFAULT_PORT_TIMEOUT_MS,
        timeout_seconds: Optional[float] = DEFAULT_CHECKER_TIMEOUT_SECONDS,
    ):
        super().__init__(name="PortsChecker", timeout_seconds=timeout_seconds)
        self.ports = list(ports)
        self.timeout_ms = timeout_ms

    async def _check(self) -> List[CheckResult]:
        # Порты проверяются параллельно, gather сохраняет порядок из конфига
        return list(await asyncio.gather(*[
            timed_check(f"Port {p.port} ({p.name})", lambda p=p: self.check_port(p))
            for p in self.ports
        ]))

    async def check_port(self, port_def: PortConfig) -> Outcome:
        if await probe_port(port_def.port, self.timeout_ms):
            return Outcome.passed(f"{port_def.name} is accepting connections on port {port_def.port}")

        return Outcome.failed(f"Nothing listening on port {port_def.port}. Is {port_def.name} running?")
