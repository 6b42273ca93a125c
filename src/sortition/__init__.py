from sortition.__about__ import (
    __author__,
    __copyright__,
    __email__,
    __license__,
    __summary__,
    __title__,
    __uri__,
    __version__,
)
from sortition.framework.configuration import build_configuration
from sortition.framework.randomness import (
    DeferredRandom,
    Dice,
    GeneratorStream,
    RandomnessError,
    RandomnessManager,
    RandomnessStream,
)
from sortition.interface import RandomnessContext
