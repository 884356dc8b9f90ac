"""
Transfer Network Graph Engine

This package turns a weekly address-to-address transfer edge list into a
laid-out, colored and sized graph that an interactive renderer can consume.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Responsibility: Upstream payload schema, enums, exception hierarchy
   - Outputs: GraphPayload, Metric, ScaleType, GraphError subclasses
   - MUST NOT: Hold graph state

2. CORE GRAPH (core/)
   - Responsibility: Graph model, builder, community overlay, size encoder
   - Allowed inputs: GraphPayload, cluster assignments
   - Outputs: A populated TransferGraph
   - MUST NOT: Run physics, hold UI state

3. LAYOUT (layout/)
   - Responsibility: ForceAtlas2 physics with Barnes-Hut repulsion
   - Allowed inputs: A live TransferGraph
   - Outputs: Mutated node x/y positions only
   - MUST NOT: Touch size, color or community attributes

PIPELINE ORDER:
===============
build -> community overlay -> size encoder -> layout.
Every stage runs to completion before the next observes the graph.
"""

__version__ = "0.1.0"
