import base64
import io

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D
from matplotlib.patches import FancyArrow
import numpy as np

from .drawing import Command, DrawingState

def visualize(commands: list[Command]) -> str:
    """
    Render the path the robot will draw for `commands`.

    The path is computed from the same pose arithmetic the robot is driven
    with, so turns rounded to quarter turns are not reflected here; the image
    shows the intended drawing.

    Args:
        commands: Parsed drawing commands

    Returns:
        str: The rendering as a base64 encoded PNG
    """
    state = DrawingState()
    points = [state.pose.position] + [position for _, _, position in state.plan(commands)]
    path = np.array(points)

    fig, ax = plt.subplots(figsize=(10, 10))
    ax.set_aspect('equal')
    ax.set_title("Planned drawing")
    ax.grid(True)
    ax.set_xlabel("X")
    ax.set_ylabel("Y")

    ax.plot(path[:, 0], path[:, 1], color='black', linewidth=2, marker='o', markersize=3)
    ax.plot(path[0, 0], path[0, 1], color='green', marker='s', markersize=8)
    ax.plot(path[-1, 0], path[-1, 1], color='red', marker='s', markersize=8)
    # starting heading: up the page
    ax.add_patch(FancyArrow(path[0, 0], path[0, 1], 0, 1, width=0.1, color='green', alpha=0.5))

    ax.legend(handles=[
        Line2D([0], [0], color='black', lw=2, label="Line"),
        Line2D([0], [0], color='green', marker='s', lw=0, label="Start"),
        Line2D([0], [0], color='red', marker='s', lw=0, label="End"),
    ])

    buffer = io.BytesIO()
    fig.savefig(buffer, format='png')
    plt.close(fig)
    return base64.b64encode(buffer.getvalue()).decode('ascii')
