"""
The static sequence combinators.

These operate on a SequenceBatch, so a single call threads the
step function over every sequence of a minibatch at once. The
recurrence walks the time axis of the padded tensor; sequences
which have already ended simply hold their final state.
"""
from typing import Callable, List, Optional

import torch

from dynamite import Core
from dynamite import Basics


def recurrence(step: Core.BinaryModel,
               initial_state: Optional[torch.Tensor] = None,
               ) -> Core.UnaryModel:
    """
    Makes a model applying step(prev_state, x_t) along the time axis.

    :param step: The step model. Must know its output_dim if no initial state is given.
    :param initial_state: The state before the first step, [state] or [batch, state]. Zero if None.
    :return: A model mapping a SequenceBatch of inputs to a SequenceBatch of states
    """
    task = "Running a static recurrence"
    if initial_state is None and step.output_dim is None:
        reason = """\
        The step function does not declare an output width and no
        initial state was given, so the initial state cannot be
        built. Provide initial_state.
        """
        raise Core.LayerException(Core.dedent(reason), task)

    def forward(x: Core.SequenceBatch) -> Core.SequenceBatch:
        data = x.data
        if initial_state is None:
            state = torch.zeros([x.batch_size, step.output_dim], dtype=data.dtype, device=data.device)
        else:
            state = initial_state.expand(x.batch_size, initial_state.shape[-1])

        mask = x.mask().to(data.device)
        outputs: List[torch.Tensor] = []
        for t in range(x.max_length):
            update = step(state, data[:, t])
            state = torch.where(mask[:, t].unsqueeze(-1), update, state)
            outputs.append(state)

        if len(outputs) == 0:
            return x.with_data(state.unsqueeze(1)[:, :0])
        return x.with_data(torch.stack(outputs, dim=1))

    return Core.Model(forward, nested={"step": step}, output_dim=step.output_dim)


def last(x: Core.SequenceBatch) -> torch.Tensor:
    """The entry at each sequence's final valid step, [batch, ...]"""
    if torch.any(x.lengths < 1):
        raise Core.LayerException("Cannot take the last step of an empty sequence",
                                  "Selecting the last step")
    rows = torch.arange(x.batch_size, device=x.data.device)
    return x.data[rows, x.lengths.to(x.data.device) - 1]


def fold(step: Core.BinaryModel, initial_state: Optional[torch.Tensor] = None) -> Core.UnaryModel:
    """
    Runs the recurrence and keeps only the final state of each sequence.
    The step is reachable by nested lookup as "step".
    """
    rec = recurrence(step, initial_state)

    def forward(x: Core.SequenceBatch) -> torch.Tensor:
        return last(rec(x))

    return Core.Model(forward, nested={"step": step}, output_dim=step.output_dim)


def map(function: Core.UnaryModel) -> Callable[[List[torch.Tensor]], List[torch.Tensor]]:
    """Applies a unary model to every item of a list"""
    return Core.make_batch_map(function)


def embedding(embedding_dim: int,
              input_dim: Optional[int] = None,
              device: Optional[torch.device] = None,
              dtype: Optional[torch.dtype] = None,
              ) -> Core.Model:
    """An embedding mapped over a list of steps. Parameter 'E' is shared with the embedding."""
    embed = Basics.embedding(embedding_dim, input_dim, device, dtype)
    return Core.Model(map(embed),
                      output_dim=embedding_dim,
                      parameter_block=embed.parameter_block)
