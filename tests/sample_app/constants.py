from typing import Annotated, ClassVar, Final

from .markers import Deprecated


class Limits:
    MAX_USERS: Final[Annotated[int, Deprecated("use quotas")]] = 100
    DEFAULT_PAGE_SIZE: int = 25
    _RETRY_DELAY = 5
    __SECRET = "s3cret"
    timeout = 30
    registry: ClassVar[dict] = {}

    def HELPER(self):
        return None


class StrictLimits(Limits):
    MAX_USERS: Final = 10
    BURST: Final[int] = 3
