"""
The eager sequence combinators. A sequence is a python list of
per step tensors and every step is issued as its own operation.
"""
from typing import List, Optional

import torch

from dynamite import Core


def unrolled_recurrence(step: Core.BinaryModel,
                        initial_state: Optional[torch.Tensor] = None,
                        go_backwards: bool = False,
                        ) -> Core.UnarySequenceModel:
    """
    Makes a model threading step(prev_state, x_t) over a list of steps.

    The output list is aligned with the input: entry t is the state
    after consuming x_t. Going backwards, the first step consumed is
    the final one, and each state still lands at its own position.

    Without an initial state the recurrence starts from zeros of width
    step.output_dim, made on the device and dtype of the first step.
    """
    if initial_state is None and step.output_dim is None:
        reason = """\
        The step function does not declare an output width and no
        initial state was given, so the initial state cannot be
        built. Provide initial_state.
        """
        raise Core.LayerException(Core.dedent(reason), "Running an unrolled recurrence")

    def forward(sequence: List[torch.Tensor]) -> List[torch.Tensor]:
        length = len(sequence)
        order = range(length - 1, -1, -1) if go_backwards else range(length)
        outputs: List[torch.Tensor] = [None] * length
        state = initial_state
        if state is None and length > 0:
            state = sequence[0].new_zeros([step.output_dim])
        for t in order:
            state = step(state, sequence[t])
            outputs[t] = state
        return outputs

    return Core.Model(forward, nested={"step": step}, output_dim=step.output_dim)


def bi_recurrence(step_fwd: Core.BinaryModel,
                  step_bwd: Core.BinaryModel,
                  initial_state: Optional[torch.Tensor] = None,
                  ) -> Core.UnarySequenceModel:
    """
    Runs a forward and a backward recurrence over the same list and
    splices their states step by step along axis 0.
    """
    fwd = unrolled_recurrence(step_fwd, initial_state)
    bwd = unrolled_recurrence(step_bwd, initial_state, go_backwards=True)
    splice = Core.make_batch_map(lambda a, b: Core.splice([a, b], dim=0))

    def forward(sequence: List[torch.Tensor]) -> List[torch.Tensor]:
        return splice(fwd(sequence), bwd(sequence))

    output_dim = None
    if step_fwd.output_dim is not None and step_bwd.output_dim is not None:
        output_dim = step_fwd.output_dim + step_bwd.output_dim
    return Core.Model(forward, nested={"fwd": step_fwd, "bwd": step_bwd}, output_dim=output_dim)
