"""Bootstrap topology: three sensor inputs, two hidden nodes, two steering outputs."""
from .graph import Node, NodeRole

FORWARD_HIT = "ForwardHit"
RIGHT_HIT = "RightHit"
LEFT_HIT = "LeftHit"
LEFT = "Left"
RIGHT = "Right"

INPUT_IDS = (FORWARD_HIT, RIGHT_HIT, LEFT_HIT)
OUTPUT_IDS = (LEFT, RIGHT)


def default_nodes() -> list[Node]:
    """Build a fresh copy of the default network.

    The weights are the exact values of a hand-tuned network that keeps the
    car on the track.
    """
    return [
        Node.input(FORWARD_HIT, x=100, y=60)
        .connect("Hidden1", -1.312374472618103)
        .connect("Hidden2", -0.21040841937065125),
        Node.input(RIGHT_HIT, x=100, y=120)
        .connect("Hidden1", 1.0978878736495972)
        .connect("Hidden2", -3.6460912227630615),
        Node.input(LEFT_HIT, x=100, y=180)
        .connect("Hidden1", -3.113811492919922)
        .connect("Hidden2", 1.0425070524215698),
        Node.computed("Hidden1", NodeRole.HIDDEN, "sigmoid", 1.9063713550567627, x=450, y=0)
        .connect(LEFT, 1.785682678222656)
        .connect(RIGHT, -5.199692726135254),
        Node.computed("Hidden2", NodeRole.HIDDEN, "sigmoid", 1.4540787935256958, x=450, y=200)
        .connect(LEFT, -4.081671714782715)
        .connect(RIGHT, 2.927220106124878),
        Node.computed(LEFT, NodeRole.OUTPUT, "step", 0.24100065231323242, x=850, y=50),
        Node.computed(RIGHT, NodeRole.OUTPUT, "step", 0.26800012588500977, x=850, y=150),
    ]
