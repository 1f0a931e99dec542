from .client import SubsonicClient, SubsonicTransport
from .provider import SubsonicMediaProvider
from .server import SubsonicServer

__all__ = ["SubsonicClient", "SubsonicMediaProvider", "SubsonicServer", "SubsonicTransport"]
