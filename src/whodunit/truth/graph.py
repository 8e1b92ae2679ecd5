"""Relationship web wrapper around NetworkX."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

import networkx as nx

from whodunit.domain.enums import VICTIM_ID
from whodunit.domain.models import Case, Relationship


@dataclass
class RelationshipWeb:
    graph: nx.DiGraph = field(default_factory=nx.DiGraph)

    def add_participant(self, participant_id: str, name: str, role: str = "suspect") -> None:
        self.graph.add_node(participant_id, name=name, role=role)

    def add_relationship(self, source_id: str, relationship: Relationship) -> None:
        for node_id in (source_id, relationship.target_id):
            if node_id not in self.graph:
                raise KeyError(f"Unknown participant id: {node_id}")
        self.graph.add_edge(source_id, relationship.target_id, relationship=relationship)

    def relationship_between(self, source_id: str, target_id: str) -> Relationship | None:
        data = self.graph.get_edge_data(source_id, target_id)
        if data is None:
            return None
        return data["relationship"]

    def relationships_from(self, source_id: str) -> list[Relationship]:
        """Relationships held by ``source_id``, in insertion order."""
        return [data["relationship"] for _, _, data in self.graph.out_edges(source_id, data=True)]

    def relationships_about(self, target_id: str) -> Iterator[tuple[str, Relationship]]:
        for source_id, _, data in self.graph.in_edges(target_id, data=True):
            yield source_id, data["relationship"]


def build_web(case: Case) -> RelationshipWeb:
    web = RelationshipWeb()
    web.add_participant(VICTIM_ID, case.victim.name, role="victim")
    for state in case.characters:
        web.add_participant(state.id, state.suspect.name)
    for state in case.characters:
        for relationship in state.facts.relationships:
            web.add_relationship(state.id, relationship)
    return web
