# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver Graph — dreams projected into a relationship graph.

Every fragment becomes a node; every character, emotion and location it
mentions becomes (or reuses) an entity node, linked back to the fragment.
Entity nodes are shared across fragments and dreams by their
(category, value) key, so "貓" the character and "貓" the location stay
apart while two dreams that both feature "貓" meet at one node.

Layout, colors and physics belong to whatever renders the result.
"""

import logging
from typing import Dict, List, Sequence

from journal.schemas import Dream, DreamGraph, GraphEdge, GraphNode, NodeKey

logger = logging.getLogger("dreamweaver.graph")

FRAGMENT = "fragment"
CHARACTER = "character"
EMOTION = "emotion"
LOCATION = "location"

FRAGMENT_WEIGHT = 10
ENTITY_WEIGHT = 5
LABEL_CHARS = 10
ELLIPSIS = "..."

# Visiting order for entity links
ENTITY_FIELDS = (
    (CHARACTER, "characters"),
    (EMOTION, "emotions"),
    (LOCATION, "locations"),
)


def fragment_label(text: str) -> str:
    return text[:LABEL_CHARS] + ELLIPSIS


def project_graph(dreams: Sequence[Dream]) -> DreamGraph:
    """
    Build the node/edge set for the relationship view.

    Nodes are deduplicated by key (first-seen attributes win); edges are
    not, so a fragment naming the same entity twice yields two links.
    """
    nodes: Dict[NodeKey, GraphNode] = {}
    edges: List[GraphEdge] = []

    for dream in dreams:
        for frag in dream.fragments:
            frag_key = NodeKey(FRAGMENT, frag.id)
            if frag_key not in nodes:
                nodes[frag_key] = GraphNode(
                    key=frag_key, name=fragment_label(frag.text), val=FRAGMENT_WEIGHT,
                )

            for group, field in ENTITY_FIELDS:
                for value in getattr(frag, field):
                    entity_key = NodeKey(group, value)
                    if entity_key not in nodes:
                        nodes[entity_key] = GraphNode(
                            key=entity_key, name=value, val=ENTITY_WEIGHT,
                        )
                    edges.append(GraphEdge(source=frag_key, target=entity_key))

    logger.debug("Graph: %d nodes, %d edges", len(nodes), len(edges))
    return DreamGraph(nodes=list(nodes.values()), edges=edges)
