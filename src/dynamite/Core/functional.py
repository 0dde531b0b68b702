"""
Small tensor helpers shared by the layers, the models
and the minibatch conversion code.

Per sequence tensors are laid out [time, ...]: the sequence
axis always comes first.
"""
from typing import List, Sequence

import torch

from dynamite.Core import errors


def index(tensor: torch.Tensor, i: int) -> torch.Tensor:
    """
    Selects step i along the sequence axis and drops that axis.

    :param tensor: A tensor of shape [time, ...]
    :param i: The step to select
    :return: A tensor of shape [...]
    """
    if tensor.dim() == 0:
        raise errors.MinibatchConversionException("Cannot index into a scalar", "Indexing a sequence")
    length = tensor.shape[0]
    if i < 0 or i >= length:
        reason = f"Index {i} is out of range for a sequence of length {length}"
        raise errors.MinibatchConversionException(reason, "Indexing a sequence")
    return tensor.select(0, i)


def to_vector(tensor: torch.Tensor) -> List[torch.Tensor]:
    """Splits a [time, ...] tensor into a list of its steps"""
    return [index(tensor, t) for t in range(tensor.shape[0])]


def splice(tensors: Sequence[torch.Tensor], dim: int = 0) -> torch.Tensor:
    """Joins tensors along an existing axis"""
    return torch.cat(list(tensors), dim=dim)


def softmax(z: torch.Tensor) -> torch.Tensor:
    """Softmax normalized over every element of z"""
    normalizer = torch.logsumexp(z.reshape(-1), dim=0)
    return torch.exp(z - normalizer)


def softmax_cross_entropy(z: torch.Tensor, label: torch.Tensor) -> torch.Tensor:
    """
    Cross entropy of a one hot (or soft) label against the
    softmax of the logits z, reduced over the last axis:

        logsumexp(z) - <label, z>

    A [classes] input gives a scalar; a [batch, classes] input
    gives one loss per row.
    """
    return torch.logsumexp(z, dim=-1) - (label * z).sum(dim=-1)


def classification_error(z: torch.Tensor, label: torch.Tensor) -> torch.Tensor:
    """1.0 where the arg max of z misses the arg max of the label, else 0.0"""
    return (z.argmax(dim=-1) != label.argmax(dim=-1)).to(z.dtype)


def flush(tensor: torch.Tensor) -> torch.Tensor:
    """Blocks until outstanding device work producing tensor is done"""
    if tensor.is_cuda:
        torch.cuda.synchronize(tensor.device)
    return tensor
