"""
Conversion of packed minibatch data into the forms the two
model formulations consume.

The eager formulation wants one tensor per sequence; the static
formulation wants padded tensors covering the whole minibatch.
"""
from typing import List, Sequence

import torch
from torch.nn.utils import rnn

from dynamite import Core
from dynamite.Data.ctf import StreamInformation
from dynamite.Data.minibatch import StreamData


def from_packed_minibatch(inputs: Sequence[rnn.PackedSequence],
                          streams: Sequence[StreamInformation],
                          ) -> List[List[torch.Tensor]]:
    """
    Splits packed minibatch arguments into per sequence tensors.

    :param inputs: One packed tensor per argument
    :param streams: The matching stream descriptions. Only consulted
        for whether a stream is a sequence.
    :return: List[num_args] of List[num_sequences] of tensors. Sequence
        streams give [length, dim]; other streams have their single
        sample axis removed, giving [dim].
    """
    task = "Converting a packed minibatch"
    if len(inputs) != len(streams):
        reason = f"Received {len(inputs)} inputs but {len(streams)} stream descriptions"
        raise Core.MinibatchConversionException(reason, task)

    output: List[List[torch.Tensor]] = []
    num_sequences = None
    for packed, stream in zip(inputs, streams):
        sequences = rnn.unpack_sequence(packed)
        if num_sequences is None:
            num_sequences = len(sequences)
        elif num_sequences != len(sequences):
            raise Core.MinibatchConversionException("inconsistent MB size", task)

        if not stream.is_sequence:
            converted = []
            for sequence in sequences:
                if sequence.shape[0] != 1:
                    reason = f"""\
                    Stream '{stream.name}' is not a sequence, but an entry
                    holds {sequence.shape[0]} samples
                    """
                    raise Core.MinibatchConversionException(Core.dedent(reason), task)
                converted.append(Core.index(sequence, 0))
            sequences = converted
        output.append(sequences)
    return output


def to_sequence_batch(stream_data: StreamData) -> Core.SequenceBatch:
    """The padded [batch, time, dim] view of a sequence stream"""
    return Core.SequenceBatch.from_packed(stream_data.data)


def to_dense_batch(stream_data: StreamData) -> torch.Tensor:
    """The [batch, dim] view of a stream holding one sample per sequence"""
    padded = to_sequence_batch(stream_data)
    if torch.any(padded.lengths != 1):
        raise Core.MinibatchConversionException("Every entry must hold exactly one sample",
                                                "Converting a stream to a dense batch")
    return padded.data[:, 0]
