"""
Factories for the learnable tensors the layers capture.

Weights are laid out [output_dim, input_dim] and Glorot
initialized. When input_dim is not known at construction the
weight starts life as an UninitializedParameter and is
materialized the first time its layer sees an input; the
parameter object keeps its identity, so closures that
captured it remain valid.
"""
from typing import Optional

import torch
from torch import nn


def make_weight(output_dim: int,
                input_dim: Optional[int] = None,
                device: Optional[torch.device] = None,
                dtype: Optional[torch.dtype] = None,
                ) -> nn.Parameter:
    """
    Makes a glorot uniform weight matrix.

    :param output_dim: The number of rows
    :param input_dim: The number of columns. None to infer on first use.
    :param device: The torch device
    :param dtype: The torch dtype
    :return: The weight parameter
    """
    if input_dim is None:
        return nn.UninitializedParameter(device=device, dtype=dtype)
    parameter = torch.empty([output_dim, input_dim], device=device, dtype=dtype)
    nn.init.xavier_uniform_(parameter)
    return nn.Parameter(parameter)


def make_bias(output_dim: int,
              device: Optional[torch.device] = None,
              dtype: Optional[torch.dtype] = None,
              ) -> nn.Parameter:
    """ Makes a zero bias."""
    parameter = torch.zeros([output_dim], device=device, dtype=dtype)
    return nn.Parameter(parameter)


def make_vector(dim: int,
                device: Optional[torch.device] = None,
                dtype: Optional[torch.dtype] = None,
                ) -> nn.Parameter:
    """
    Makes a glorot uniform vector. Initialized as a one row
    matrix, since fan in and fan out are undefined for rank one.
    """
    parameter = torch.empty([1, dim], device=device, dtype=dtype)
    nn.init.xavier_uniform_(parameter)
    return nn.Parameter(parameter.squeeze(0))


def materialize(weight: nn.Parameter, output_dim: int, input_dim: int):
    """Gives a lazily created weight its shape. Does nothing otherwise."""
    if isinstance(weight, nn.UninitializedParameter):
        weight.materialize([output_dim, input_dim])
        nn.init.xavier_uniform_(weight)
