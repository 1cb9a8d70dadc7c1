"""Application DTOs."""

from cftoken.application.dtos.token import TokenOverrides

__all__ = ["TokenOverrides"]
