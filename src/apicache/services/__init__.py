"""API services built on :class:`~apicache.client.CachingHttpClient`.

Each service gets its own cache namespace; see :func:`build_services`.
"""

from apicache.services.registry import SERVICES, Api, build_services, create_api
from apicache.services.upload import UploadService

__all__ = ["SERVICES", "Api", "UploadService", "build_services", "create_api"]
