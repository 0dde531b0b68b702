from typing import Sequence

from dynamite import Core


def sequential(models: Sequence[Core.Model]) -> Core.UnaryModel:
    """
    Chains unary models, feeding each one the output of the last.

    The captured models are reachable through nested lookup under
    their position, written "[0]", "[1]", and so on.
    """
    models = list(models)
    captured = {"[%d]" % i: model for i, model in enumerate(models)}

    def forward(x):
        for model in models:
            x = model(x)
        return x

    output_dim = models[-1].output_dim if models else None
    return Core.Model(forward, nested=captured, output_dim=output_dim)
