import random

import pytest

from crowdwatch.config import ConsoleSettings
from crowdwatch.console import OperatorConsole
from crowdwatch.scheduler import ManualScheduler

MIB = 1024 * 1024


@pytest.fixture
def settings():
    return ConsoleSettings(operator_name="Jane Smith", random_seed=7)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def console(settings, scheduler):
    c = OperatorConsole(scheduler, settings=settings, rng=random.Random(7))
    yield c
    c.close()
