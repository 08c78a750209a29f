"""Roadmap written to a fresh data file on first start."""

from milepost.application import DEFAULT_ROOT_TITLE
from milepost.domain.roadmap import Node, NodeType

_KNOWLEDGE_PREPARATION = "Knowledge Preparation Phase"

# (axis title, collection, [(item title, item kind, [(phase title, [task, ...]), ...] | [task, ...])])
SEED_AXES = [
    (
        "Knowledge Retrieval Enhancement",
        "pipelines",
        [
            (
                "RAG Pipeline",
                NodeType.PIPELINE,
                [
                    (
                        _KNOWLEDGE_PREPARATION,
                        [
                            "Document preprocessing and cleaning",
                            "Chunking strategies optimization",
                            "Metadata extraction and enrichment",
                            "Format standardization",
                        ],
                    ),
                    (
                        "Knowledge Ingestion Phase",
                        [
                            "Vector database setup and configuration",
                            "Embedding model selection and implementation",
                            "Indexing strategies",
                            "Version control for knowledge updates",
                        ],
                    ),
                    (
                        "Pipeline-AI Connection",
                        [
                            "Query interface development",
                            "Context window management",
                            "Retrieval mechanism configuration",
                            "Response synthesis setup",
                        ],
                    ),
                    (
                        "AI Assistant Optimization",
                        [
                            "Prompt engineering for RAG queries",
                            "Retrieval threshold tuning",
                            "Re-ranking mechanisms",
                            "Fallback strategies",
                        ],
                    ),
                ],
            ),
            (
                "Knowledge Graph RAG",
                NodeType.PIPELINE,
                [
                    (
                        _KNOWLEDGE_PREPARATION,
                        [
                            "Entity extraction and recognition",
                            "Relationship mapping",
                            "Ontology design",
                            "Graph schema definition",
                        ],
                    ),
                ],
            ),
            (
                "Claude Code Knowledge Base",
                NodeType.PIPELINE,
                [
                    (
                        _KNOWLEDGE_PREPARATION,
                        [
                            "File structure organization",
                            "Documentation format standardization",
                            "Code snippet cataloging",
                            "Sub-agent knowledge segmentation",
                        ],
                    ),
                ],
            ),
        ],
    ),
    (
        "Tool Integration via MCP",
        "components",
        [
            (
                "MCP Server Discovery & Selection",
                NodeType.COMPONENT,
                [
                    "Available MCP servers catalog",
                    "Capability matrix creation",
                    "Performance benchmarking",
                    "Compatibility verification",
                ],
            ),
            (
                "MCP Client Configuration",
                NodeType.COMPONENT,
                [
                    "Request/response patterns",
                    "Error handling protocols",
                    "Retry mechanisms",
                    "Timeout configurations",
                ],
            ),
        ],
    ),
    (
        "Custom MCP Server Development",
        "phases",
        [
            (
                "API-to-MCP Bridge Creation",
                NodeType.PHASE,
                [
                    "API specification analysis",
                    "Endpoint mapping design",
                    "Authentication wrapper development",
                    "Rate limiting implementation",
                ],
            ),
        ],
    ),
]


def _task(title: str) -> Node:
    return Node(title=title, validated=False, progress=0)


def _group(title: str, node_type: NodeType, **collections: list[Node]) -> Node:
    return Node(title=title, type=node_type, progress=0, validated=False, **collections)


def _item(title: str, node_type: NodeType, body: list) -> Node:
    # Pipelines hold phases of tasks; components and phases hold tasks directly.
    if node_type == NodeType.PIPELINE:
        phases = [
            _group(phase, NodeType.PHASE, tasks=[_task(t) for t in tasks]) for phase, tasks in body
        ]
        return _group(title, node_type, phases=phases)
    return _group(title, node_type, tasks=[_task(t) for t in body])


def build_seed_roadmap(title: str = DEFAULT_ROOT_TITLE) -> Node:
    """Build the starter roadmap with fresh ids."""
    axes = [
        _group(
            axis_title,
            NodeType.AXIS,
            **{collection: [_item(*item) for item in items]},
        )
        for axis_title, collection, items in SEED_AXES
    ]
    return Node(
        id="root",
        title=title,
        type=NodeType.ROOT,
        progress=0,
        validated=False,
        axes=axes,
    )
