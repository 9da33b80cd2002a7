import logging

import matplotlib.pyplot as plt
import networkx as nx
from matplotlib.lines import Line2D
from matplotlib.patches import Patch

logger = logging.getLogger(__name__)


def _layered_positions(G):
    """Place each task in a column by its depth in the dependency graph."""
    for layer, nodes in enumerate(nx.topological_generations(G)):
        for node in nodes:
            G.nodes[node]["layer"] = layer
    return nx.multipartite_layout(G, subset_key="layer")


def create_network_diagram(report, graph, filename=None, show=False, layout="layered"):
    """
    Draw the task dependency network with the critical path highlighted.

    Args:
        report: CPMReport from the scheduler
        graph: The DependencyGraph the report was computed on
        filename: Optional filename to save the diagram
        show: Whether to display the diagram
        layout: 'layered' (columns by dependency depth), 'spring' or 'circular'

    Returns:
        The matplotlib figure
    """
    G = graph.to_networkx()
    results = report.by_task()
    chain = report.critical_chain
    chain_links = set(zip(chain, chain[1:]))

    fig = plt.figure(figsize=(12, 8))

    node_colors = []
    for node in G.nodes():
        result = results.get(node)
        node_colors.append("red" if result is not None and result.is_critical else "skyblue")

    edge_colors = []
    edge_widths = []
    for u, v in G.edges():
        if (u, v) in chain_links:
            edge_colors.append("red")
            edge_widths.append(2.5)
        else:
            edge_colors.append("gray")
            edge_widths.append(1.0)

    if layout == "layered":
        pos = _layered_positions(G)
    elif layout == "circular":
        pos = nx.circular_layout(G)
    else:
        pos = nx.spring_layout(G, seed=42)

    nx.draw_networkx_nodes(
        G, pos, node_color=node_colors, node_size=600, node_shape="o", edgecolors="black"
    )
    nx.draw_networkx_edges(
        G,
        pos,
        edge_color=edge_colors,
        width=edge_widths,
        arrowsize=15,
        arrowstyle="-|>",
        connectionstyle="arc3,rad=0.1",
    )

    labels = {}
    for node, data in G.nodes(data=True):
        result = results.get(node)
        slack = f"\nslack {result.slack}d" if result is not None else ""
        labels[node] = f"{node} ({data['duration']}d){slack}"

    bbox_props = dict(boxstyle="round,pad=0.3", fc="white", ec="gray", alpha=0.8)
    for node, label in labels.items():
        plt.text(
            pos[node][0],
            pos[node][1] - 0.02,
            label,
            horizontalalignment="center",
            bbox=bbox_props,
            fontsize=9,
        )

    legend_elements = [
        Patch(facecolor="red", edgecolor="black", label="Critical Task"),
        Patch(facecolor="skyblue", edgecolor="black", label="Task With Slack"),
        Line2D([0], [0], color="red", lw=2.5, label="Critical Path"),
    ]
    plt.legend(handles=legend_elements, loc="best", fontsize=10)

    plt.title(
        f"Project Network ({report.total_duration} working days)", fontsize=14
    )
    plt.axis("off")
    plt.tight_layout()

    if filename:
        plt.savefig(filename, dpi=150, bbox_inches="tight")
        logger.info("Network diagram saved to %s", filename)

    if show:
        plt.show()

    return fig
