"""Reassembly — segment concatenation and boundary normalization."""

from linesplit.reassembly.normalizer import BoundaryNormalizer, normalizer_for
from linesplit.reassembly.reassembler import ReassembledStream, ReassemblyError, reassemble

__all__ = [
    "BoundaryNormalizer",
    "ReassembledStream",
    "ReassemblyError",
    "normalizer_for",
    "reassemble",
]
