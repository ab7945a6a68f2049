import matplotlib
matplotlib.use("Agg")
import numpy as np
from matplotlib import pyplot as plt


def mutation_labels(summary):
    return ["{}:{}{}{} ({})".format(row.Gene, row.Reference, row.Position, row.Mutation, row.Fungicide)
            for row in summary.itertuples(index=False)]


def support_plot(summary, title=None):
    labels = mutation_labels(summary)
    y = np.arange(len(labels))
    fig, ax = plt.subplots(figsize=(8, max(2.5, 0.4 * len(labels) + 1)))
    ax.barh(y, summary["Support_Reads"].to_numpy(), color="#4c72b0")
    ax.set_yticks(y)
    ax.set_yticklabels(labels)
    ax.invert_yaxis()
    ax.set_xlabel("Supporting reads")
    if title is not None:
        ax.set_title(title)
    fig.tight_layout()
    return fig


def plot_support(summary, path, title=None):
    """ Save a bar chart of Support_Reads per mutation. Returns the path, or None when there is nothing to plot. """
    if summary.empty:
        return None
    fig = support_plot(summary, title=title)
    try:
        fig.savefig(path)
    finally:
        plt.close(fig)
    return path
