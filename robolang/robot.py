"""
robolang.robot – интерфейс робота, через который программа действует и
получает показания датчиков. Сама симуляция мира сюда не входит.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class Robot(Protocol):
    # действия
    def move(self) -> None: ...
    def turnLeft(self) -> None: ...
    def turnRight(self) -> None: ...
    def takeFuel(self) -> None: ...
    def idleWait(self) -> None: ...
    def turnAround(self) -> None: ...
    def setShield(self, on: bool) -> None: ...

    # датчики
    def getOpponentFB(self) -> int: ...
    def getOpponentLR(self) -> int: ...
    def getBarrelFB(self, rank: int) -> int: ...
    def getBarrelLR(self, rank: int) -> int: ...
    def getFuel(self) -> int: ...
    def getDistanceToWall(self) -> int: ...
    def numBarrels(self) -> int: ...


# ----------------------------------------------------------------------
#  Робот-заглушка для CLI: пишет вызовы в лог
# ----------------------------------------------------------------------
class LoggingRobot:
    """Отвечает на все датчики одним значением и считает вызовы.

    Симуляции нет: используется для прогона программы из командной строки.
    """

    def __init__(self, sensor_value: int = 0):
        self.sensor_value = sensor_value
        self.call_count = 0
        self.last_call: Optional[Tuple] = None

    def _record(self, call: Tuple) -> None:
        # хранится только счётчик и последний вызов
        self.call_count += 1
        self.last_call = call

    def _act(self, *call) -> None:
        self._record(call)
        logger.info("robot: %s", " ".join(str(c) for c in call))

    def _sense(self, *call) -> int:
        self._record(call)
        logger.debug("robot sensor: %s -> %d", " ".join(str(c) for c in call), self.sensor_value)
        return self.sensor_value

    def move(self): self._act('move')
    def turnLeft(self): self._act('turnLeft')
    def turnRight(self): self._act('turnRight')
    def takeFuel(self): self._act('takeFuel')
    def idleWait(self): self._act('idleWait')
    def turnAround(self): self._act('turnAround')
    def setShield(self, on): self._act('setShield', on)

    def getOpponentFB(self): return self._sense('getOpponentFB')
    def getOpponentLR(self): return self._sense('getOpponentLR')
    def getBarrelFB(self, rank): return self._sense('getBarrelFB', rank)
    def getBarrelLR(self, rank): return self._sense('getBarrelLR', rank)
    def getFuel(self): return self._sense('getFuel')
    def getDistanceToWall(self): return self._sense('getDistanceToWall')
    def numBarrels(self): return self._sense('numBarrels')
