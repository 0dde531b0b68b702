"""
Combinators that thread a model over a batch held
as a python list of per item tensors.

Items are processed one at a time in list order. Nothing
here batches the underlying computation; that is the job
of the engine, or of the static formulation in Sequence.
"""
from typing import Any, Callable, List, Sequence, Union

import torch

from dynamite.Core import errors


def batch_map(function: Callable[..., Any], *batches: Sequence[Any]) -> List[Any]:
    """
    Applies function element wise across one or more equally
    sized batches. With two batches this calls
    function(x[i], y[i]) for every i.

    :param function: Any model or callable taking len(batches) arguments
    :param batches: The batches. Items may be tensors or lists of tensors.
    :return: A list of results, one per item
    """
    if len(batches) == 0:
        raise errors.BatchException("batch_map requires at least one batch", "Mapping over a batch")

    size = len(batches[0])
    for position, batch in enumerate(batches[1:], start=1):
        if len(batch) != size:
            reason = f"""\
            Batches handed to a map must be the same size. Batch 0 held
            {size} items, but batch {position} held {len(batch)}.
            """
            raise errors.BatchException(errors.dedent(reason), "Mapping over a batch")

    return [function(*items) for items in zip(*batches)]


def make_batch_map(function: Callable[..., Any]) -> Callable[..., List[Any]]:
    """Lifts function into a callable operating on whole batches"""
    def mapper(*batches: Sequence[Any]) -> List[Any]:
        return batch_map(function, *batches)
    return mapper


def _flatten(batch: Sequence[Union[torch.Tensor, Sequence[torch.Tensor]]]) -> List[torch.Tensor]:
    summands: List[torch.Tensor] = []
    for item in batch:
        if isinstance(item, torch.Tensor):
            summands.append(item)
        else:
            summands.extend(item)
    return summands


def batch_sum(batch: Sequence[Union[torch.Tensor, Sequence[torch.Tensor]]]) -> torch.Tensor:
    """
    Sums every tensor in the batch. A batch of sequences is
    flattened first, so every step of every sequence is a summand.
    All summands must share a shape; so does the result.
    """
    summands = _flatten(batch)
    if len(summands) == 0:
        raise errors.BatchException("Cannot sum an empty batch", "Summing a batch")

    shape = summands[0].shape
    stacked = torch.stack(summands, dim=-1)
    return stacked.sum(dim=-1).reshape(shape)
