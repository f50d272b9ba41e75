import pytest


class RecordingRobot:
    """Робот для тестов: записывает вызовы, датчики берёт из словаря."""

    def __init__(self, **sensors):
        self.calls = []
        self.sensors = {
            'fuel': 100, 'oppFB': 0, 'oppLR': 0, 'barrelFB': 0,
            'barrelLR': 0, 'wall': 0, 'numBarrels': 0,
        }
        self.sensors.update(sensors)

    def actions(self):
        return [c[0] for c in self.calls if not c[0].startswith('get') and c[0] != 'numBarrels']

    # действия
    def move(self): self.calls.append(('move',))
    def turnLeft(self): self.calls.append(('turnLeft',))
    def turnRight(self): self.calls.append(('turnRight',))
    def takeFuel(self): self.calls.append(('takeFuel',))
    def idleWait(self): self.calls.append(('idleWait',))
    def turnAround(self): self.calls.append(('turnAround',))
    def setShield(self, on): self.calls.append(('setShield', on))

    # датчики
    def getOpponentFB(self):
        self.calls.append(('getOpponentFB',))
        return self.sensors['oppFB']

    def getOpponentLR(self):
        self.calls.append(('getOpponentLR',))
        return self.sensors['oppLR']

    def getBarrelFB(self, rank):
        self.calls.append(('getBarrelFB', rank))
        return self.sensors['barrelFB']

    def getBarrelLR(self, rank):
        self.calls.append(('getBarrelLR', rank))
        return self.sensors['barrelLR']

    def getFuel(self):
        self.calls.append(('getFuel',))
        return self.sensors['fuel']

    def getDistanceToWall(self):
        self.calls.append(('getDistanceToWall',))
        return self.sensors['wall']

    def numBarrels(self):
        self.calls.append(('numBarrels',))
        return self.sensors['numBarrels']


@pytest.fixture
def robot():
    return RecordingRobot()


@pytest.fixture
def make_robot():
    return RecordingRobot
