# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Graph projection — fragment and entity nodes, fragment-entity links."""

import json

from journal.graph import project_graph, fragment_label, FRAGMENT_WEIGHT, ENTITY_WEIGHT
from journal.schemas import NodeKey


class TestProjection:

    def test_empty_collection(self):
        graph = project_graph([])
        assert graph.nodes == []
        assert graph.edges == []
        assert graph.to_render_dict() == {"nodes": [], "links": []}

    def test_single_fragment(self, dream_factory, fragment_factory):
        frag = fragment_factory(id="f1", characters=["媽媽", "狗"], emotions=["焦慮"])
        graph = project_graph([dream_factory([frag])])

        assert [n.key for n in graph.nodes] == [
            NodeKey("fragment", "f1"),
            NodeKey("character", "媽媽"),
            NodeKey("character", "狗"),
            NodeKey("emotion", "焦慮"),
        ]
        assert len(graph.edges) == 3
        assert all(e.source == NodeKey("fragment", "f1") for e in graph.edges)

    def test_weights_and_labels(self, dream_factory, fragment_factory):
        frag = fragment_factory(id="f1", text="我在一座巨大的迷宮裡面迷路了", locations=["迷宮"])
        graph = project_graph([dream_factory([frag])])
        frag_node, place_node = graph.nodes
        assert frag_node.name == "我在一座巨大的迷宮裡..."
        assert frag_node.val == FRAGMENT_WEIGHT
        assert place_node.name == "迷宮"
        assert place_node.val == ENTITY_WEIGHT
        assert place_node.group == "location"

    def test_short_text_still_gets_ellipsis(self):
        assert fragment_label("飛") == "飛..."

    def test_same_value_different_category_stays_apart(self, dream_factory, fragment_factory):
        frag = fragment_factory(characters=["海"], locations=["海"])
        graph = project_graph([dream_factory([frag])])
        keys = {n.key for n in graph.nodes}
        assert NodeKey("character", "海") in keys
        assert NodeKey("location", "海") in keys

    def test_shared_entities_collapse_across_dreams(self, dream_factory, fragment_factory):
        dreams = [
            dream_factory([fragment_factory(id="a", characters=["貓"])]),
            dream_factory([fragment_factory(id="b", characters=["貓"])]),
        ]
        graph = project_graph(dreams)
        cats = [n for n in graph.nodes if n.key == NodeKey("character", "貓")]
        assert len(cats) == 1
        assert len(graph.edges) == 2
        assert {e.source.value for e in graph.edges} == {"a", "b"}

    def test_duplicate_references_keep_duplicate_edges(self, dream_factory, fragment_factory):
        frag = fragment_factory(id="f1", emotions=["害怕", "害怕"])
        graph = project_graph([dream_factory([frag])])
        assert len(graph.nodes) == 2
        assert len(graph.edges) == 2

    def test_colors_and_actions_are_not_nodes(self, dream_factory, fragment_factory):
        frag = fragment_factory(colors=["紅"], actions=["奔跑"])
        graph = project_graph([dream_factory([frag])])
        assert [n.group for n in graph.nodes] == ["fragment"]
        assert graph.edges == []

    def test_deterministic(self, dream_factory, fragment_factory):
        dreams = [
            dream_factory([fragment_factory(characters=["A"], emotions=["B"], locations=["C"])]),
            dream_factory([fragment_factory(characters=["A", "D"])]),
        ]
        first = project_graph(dreams)
        second = project_graph(dreams)
        assert {(n.key, n.name) for n in first.nodes} == {(n.key, n.name) for n in second.nodes}
        assert first.to_render_dict() == second.to_render_dict()


class TestRenderDict:

    def test_ids_are_encoded_keys(self, dream_factory, fragment_factory):
        frag = fragment_factory(id="f1", emotions=["愛"])
        rendered = project_graph([dream_factory([frag])]).to_render_dict()

        node_ids = [n["id"] for n in rendered["nodes"]]
        assert [json.loads(i) for i in node_ids] == [["fragment", "f1"], ["emotion", "愛"]]
        assert rendered["nodes"][1] == {"id": node_ids[1], "group": "emotion", "name": "愛", "val": 5}
        assert rendered["links"] == [{"source": node_ids[0], "target": node_ids[1]}]

    def test_separator_in_value_cannot_collide(self, dream_factory, fragment_factory):
        frag = fragment_factory(characters=["emotion-x"], emotions=["x"])
        rendered = project_graph([dream_factory([frag])]).to_render_dict()
        ids = [n["id"] for n in rendered["nodes"]]
        assert len(ids) == len(set(ids))
