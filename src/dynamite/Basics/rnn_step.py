from typing import Optional

import torch

from dynamite import Core
from dynamite.Basics import parameters
from dynamite.Basics.linear import linear_forward


def rnn_step(output_dim: int,
             input_dim: Optional[int] = None,
             device: Optional[torch.device] = None,
             dtype: Optional[torch.dtype] = None,
             ) -> Core.BinaryModel:
    """
    Makes a plain relu recurrent step,

        h = relu(W x + R h_prev + b)

    called as step(h_prev, x). Works on a single sample or on any
    leading batch shape, so the same step serves the unrolled and
    the static recurrences.

    :param output_dim: The width of the recurrent state
    :param input_dim: The width of the input. None to infer on first call.
    :return: A binary model with parameters 'W', 'R' and 'b'
    """
    W = parameters.make_weight(output_dim, input_dim, device, dtype)
    R = parameters.make_weight(output_dim, output_dim, device, dtype)
    b = parameters.make_bias(output_dim, device, dtype)

    task = "Running a recurrent step"

    def forward(prev_output: torch.Tensor, x: torch.Tensor) -> torch.Tensor:
        parameters.materialize(W, output_dim, x.shape[-1])
        projected = linear_forward(x, W, None, task) + linear_forward(prev_output, R, None, task)
        return torch.relu(projected + b)

    return Core.Model(forward, {"W": W, "R": R, "b": b}, output_dim=output_dim)
