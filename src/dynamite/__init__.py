"""
Functional composition of recurrent and attention
models on top of torch.


"""

__version__ = "0.1.0"

from . import Core # noqa
from . import Basics # noqa
from . import Attention # noqa
from . import Sequence # noqa
from . import Data # noqa
from . import Models # noqa
from . import Training # noqa
