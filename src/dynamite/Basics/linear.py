"""
The projection closure shared by every layer, and the
Linear layer itself.
"""
from typing import Optional

import torch
from torch import nn

from dynamite import Core
from dynamite.Basics import parameters


def _linear_forward(tensor: torch.Tensor,
                    weight: torch.Tensor,
                    bias: Optional[torch.Tensor] = None,
                    ) -> torch.Tensor:
    """
    The direct linear forward function.
    Entirely pure.

    :param tensor: Tensor of shape [..., input_dim]
    :param weight: Weight of shape [output_dim, input_dim]
    :param bias: Optionally, bias of shape [output_dim]
    :return: Tensor of shape [..., output_dim]
    """
    tensor = torch.matmul(tensor, weight.transpose(-1, -2))
    if bias is not None:
        tensor = tensor + bias
    return tensor


torch.jit.script(_linear_forward)  # noqa


def linear_forward(tensor: torch.Tensor,
                   weight: nn.Parameter,
                   bias: Optional[torch.Tensor] = None,
                   task: Optional[str] = None
                   ) -> torch.Tensor:
    """
    The linear forward method. With validation included.
    Lazily created weights must be materialized first.
    """
    if tensor.dim() == 0:
        raise Core.LayerException("Cannot project a scalar", task)
    if tensor.shape[-1] != weight.shape[-1]:
        reason = f"""\
        Cannot perform linear operation. 'tensor' Tensor's dim -1 has
        size {tensor.shape[-1]}. However, the layer was setup
        with an expected input width of {weight.shape[-1]}.

        Tensor had shape of {tensor.shape}
        """
        raise Core.LayerException(Core.dedent(reason), task)
    if tensor.dtype != weight.dtype:
        reason = f"""\
        The parameter 'tensor' was found to have the wrong
        dtype when executing the linear operation. The tensor
        had dtype {tensor.dtype}. However, the weight
        has dtype {weight.dtype}.

        Either move the layer or the tensor to a common dtype
        using .to(dtype)
        """
        raise Core.LayerException(Core.dedent(reason), task)
    if tensor.device != weight.device:
        reason = f"""\
        The parameter 'tensor' was found to have the
        wrong device when executing the linear operation.
        The tensor has device {tensor.device}, but
        the layer is defined on device {weight.device}
        """
        raise Core.LayerException(Core.dedent(reason), task)

    return _linear_forward(tensor, weight, bias)


def linear(output_dim: int,
           input_dim: Optional[int] = None,
           device: Optional[torch.device] = None,
           dtype: Optional[torch.dtype] = None,
           ) -> Core.BroadcastingModel:
    """
    Makes a linear layer computing W x + b.

    :param output_dim: The width of the output
    :param input_dim: The width of the input. None to infer on first call.
    :param device: The device to build this on
    :param dtype: The dtype of the parameters
    :return: A broadcasting model with parameters 'W' and 'b'
    """
    W = parameters.make_weight(output_dim, input_dim, device, dtype)
    b = parameters.make_bias(output_dim, device, dtype)

    def forward(x: torch.Tensor) -> torch.Tensor:
        parameters.materialize(W, output_dim, x.shape[-1])
        return linear_forward(x, W, b, "Running a linear layer")

    return Core.BroadcastingModel(Core.Model(forward, {"W": W, "b": b}, output_dim=output_dim))
