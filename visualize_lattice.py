#!/usr/bin/env python3
"""
Generate a static visualization of a rewritten query lattice.

Usage:
    python visualize_lattice.py "cheap apple smartphone" --output lattice.png
"""

import argparse

import networkx as nx
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from querygraph.rewrite.rewriter import RuleRewriter
from querygraph.rewrite.rules import RuleSet
from querygraph.utils import Config


def create_graph(lattice):
    """Create a NetworkX multigraph from a term lattice."""
    G = nx.MultiDiGraph()
    node_ids = {node: i for i, node in enumerate(lattice.nodes())}

    for node_id in node_ids.values():
        G.add_node(node_id)

    for edge in lattice.edges():
        label = getattr(edge.label, "value", edge.label)
        G.add_edge(
            node_ids[edge.source],
            node_ids[edge.target],
            label=str(label),
            deleted=edge.deleted,
            generated=getattr(edge.label, "generated", False)
        )

    return G


def get_edge_color(data):
    """Get color for an edge by its rewrite status."""
    if data['deleted']:
        return '#E91E63'
    if data['generated']:
        return '#2196F3'
    return '#4CAF50'


def layered_layout(G):
    """Place nodes left to right by longest distance from the source."""
    depth = {}
    for node in nx.topological_sort(G):
        preds = list(G.predecessors(node))
        depth[node] = max((depth[p] + 1 for p in preds), default=0)
    for node, layer in depth.items():
        G.nodes[node]['layer'] = layer
    return nx.multipartite_layout(G, subset_key='layer')


def visualize_lattice(lattice, title, output_file='lattice.png'):
    """Create and save visualization."""
    G = create_graph(lattice)

    fig, ax = plt.subplots(1, 1, figsize=(14, 6))
    fig.suptitle(title, fontsize=14, fontweight='bold')

    pos = layered_layout(G)

    nx.draw_networkx_nodes(
        G, pos,
        node_color='#FFC107',
        node_size=300,
        edgecolors='black',
        linewidths=1,
        ax=ax
    )

    # Parallel edges between the same nodes get increasing curvature
    seen = {}
    for u, v, data in G.edges(data=True):
        rank = seen.get((u, v), 0)
        seen[(u, v)] = rank + 1
        rad = 0.25 * rank
        nx.draw_networkx_edges(
            G, pos,
            edgelist=[(u, v)],
            edge_color=get_edge_color(data),
            style='dashed' if data['deleted'] else 'solid',
            arrows=True,
            arrowsize=15,
            width=2,
            connectionstyle=f'arc3,rad={rad}',
            ax=ax
        )
        x = (pos[u][0] + pos[v][0]) / 2
        y = (pos[u][1] + pos[v][1]) / 2 + rad * 0.3
        ax.text(x, y, data['label'], fontsize=9, ha='center', color=get_edge_color(data))

    legend_text = 'green: original\nblue: generated\nred/dashed: deleted'
    ax.text(
        0.02, 0.98, legend_text,
        transform=ax.transAxes,
        fontsize=9,
        verticalalignment='top',
        bbox=dict(boxstyle='round', facecolor='wheat', alpha=0.8)
    )

    ax.axis('off')
    plt.tight_layout()
    plt.savefig(output_file, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"\n✅ Visualization saved to: {output_file}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Render the rewritten lattice of a query")
    parser.add_argument("query", help="Query text to rewrite")
    parser.add_argument("--rules", default=str(Config.RULES_PATH), help="Rules file")
    parser.add_argument("--output", default="lattice.png", help="PNG output path")
    args = parser.parse_args()

    print("🎨 Rewriting query...")
    result = RuleRewriter(RuleSet.from_yaml(args.rules)).rewrite(args.query)
    print(f"✅ Got {len(result.lattice)} edges from {len(result.matches)} matches")

    visualize_lattice(result.lattice, f'Lattice for "{args.query}"', args.output)


if __name__ == "__main__":
    main()
