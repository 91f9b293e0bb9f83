"""Webhook simulator."""

from .sim import ISim, Sim, build_payload

__all__ = ["ISim", "Sim", "build_payload"]
