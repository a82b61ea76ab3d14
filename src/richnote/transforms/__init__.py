#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/transforms/__init__.py
"""Whole-tree transformations.

- normalization: the fixed-point repair engine that enforces the structural
  invariants every codec and editor operation relies on
"""

from richnote.transforms.normalization import (
    NormalizationEngine,
    link_label,
    normalize_document,
    normalize_nodes,
    wrap_block_for,
)

__all__ = ["NormalizationEngine", "normalize_document", "normalize_nodes", "link_label", "wrap_block_for"]
