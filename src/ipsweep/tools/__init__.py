"""Network tools used by the scanning engine."""

from .probe import HTTPProber, Prober

__all__ = ["HTTPProber", "Prober"]
