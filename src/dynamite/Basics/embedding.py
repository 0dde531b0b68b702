from typing import Optional

import torch

from dynamite import Core
from dynamite.Basics import parameters
from dynamite.Basics.linear import linear_forward


def embedding(embedding_dim: int,
              input_dim: Optional[int] = None,
              device: Optional[torch.device] = None,
              dtype: Optional[torch.dtype] = None,
              ) -> Core.BroadcastingModel:
    """
    Makes an embedding computing E x for a one hot (or dense)
    input x. There is no bias.

    :param embedding_dim: The width of the embedding
    :param input_dim: The vocabulary size. None to infer on first call.
    :return: A broadcasting model with parameter 'E'
    """
    E = parameters.make_weight(embedding_dim, input_dim, device, dtype)

    def forward(x: torch.Tensor) -> torch.Tensor:
        parameters.materialize(E, embedding_dim, x.shape[-1])
        return linear_forward(x, E, None, "Running an embedding")

    return Core.BroadcastingModel(Core.Model(forward, {"E": E}, output_dim=embedding_dim))
