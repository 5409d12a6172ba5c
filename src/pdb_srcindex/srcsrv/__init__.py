"""srcsrv stream construction."""

from .builder import SrcSrvStreamBuilder
from .urls import FileUrlProvider

__all__ = ["FileUrlProvider", "SrcSrvStreamBuilder"]
