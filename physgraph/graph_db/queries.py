"""Parameterized Cypher for the persisted topic graph.

Nodes are ``(:GraphNode {id, kind, label, ...})``. Edges are ``[:LINK {kind}]``
relationships, merged on (source, target, kind). Writing an edge whose
endpoint was never persisted creates a bare ``GraphNode`` with only an id;
reads skip such stubs, and the endpoint resolves against the static model.
"""

ALL_NODES = """
MATCH (n:GraphNode)
WHERE n.kind IS NOT NULL
RETURN properties(n) AS node
ORDER BY n.id
"""

ALL_EDGES = """
MATCH (a:GraphNode)-[r:LINK]->(b:GraphNode)
RETURN a.id AS source, b.id AS target, r.kind AS kind
ORDER BY source, target, kind
"""

UPSERT_NODE = """
MERGE (n:GraphNode {id: $id})
SET n = $properties, n.updated_at = datetime()
RETURN n.id AS id
"""

UPSERT_EDGES = """
UNWIND $edges AS edge
MERGE (a:GraphNode {id: edge.source})
MERGE (b:GraphNode {id: edge.target})
MERGE (a)-[r:LINK {kind: edge.kind}]->(b)
RETURN count(r) AS written
"""

DELETE_EDGES_FROM = """
MATCH (:GraphNode {id: $source})-[r:LINK {kind: $kind}]->()
DELETE r
RETURN count(r) AS deleted
"""

FIND_NODES_BY_LABEL = """
MATCH (n:GraphNode)
WHERE n.kind IS NOT NULL AND toLower(n.label) = toLower($label)
RETURN properties(n) AS node
ORDER BY CASE n.kind WHEN 'concept' THEN 0 ELSE 1 END, n.id
LIMIT 1
"""

DELETE_ALL = """
MATCH (n:GraphNode)
DETACH DELETE n
"""
