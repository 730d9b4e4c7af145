"""Default engine bootstrap (import side-effect)."""
from .api import set_engine
from .engines.factory import make_engine
from .engines.specs import DEFAULT_SPEC

set_engine(make_engine(DEFAULT_SPEC))
