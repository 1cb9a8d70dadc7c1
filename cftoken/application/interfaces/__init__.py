"""Application interfaces (ports) implemented by infrastructure."""

from cftoken.application.interfaces.services import IPermissionCatalog, ITokenSink

__all__ = ["IPermissionCatalog", "ITokenSink"]
