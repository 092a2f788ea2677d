"""Network-wide aggregates over the per-chain TPS series."""

from .network import NetworkAggregator

__all__ = ["NetworkAggregator"]
