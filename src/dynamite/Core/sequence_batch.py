"""
The padded representation used when a whole minibatch of
variable length sequences is processed at once.
"""
from typing import NamedTuple

import torch
from torch.nn.utils import rnn


class SequenceBatch(NamedTuple):
    """
    A batch first padded tensor of shape [batch, time, ...] together
    with the true length of each sequence. Positions at or past a
    sequence's length hold padding and carry no meaning.
    """
    data: torch.Tensor
    lengths: torch.Tensor

    @classmethod
    def from_packed(cls, packed: rnn.PackedSequence) -> "SequenceBatch":
        data, lengths = rnn.pad_packed_sequence(packed, batch_first=True)
        return cls(data, lengths.to(device=data.device, dtype=torch.int64))

    @classmethod
    def from_list(cls, sequences) -> "SequenceBatch":
        lengths = torch.tensor([sequence.shape[0] for sequence in sequences], dtype=torch.int64)
        data = rnn.pad_sequence(list(sequences), batch_first=True)
        return cls(data, lengths.to(data.device))

    @property
    def batch_size(self) -> int:
        return self.data.shape[0]

    @property
    def max_length(self) -> int:
        return self.data.shape[1]

    def mask(self) -> torch.Tensor:
        """Bool tensor of shape [batch, time]; True where data is real"""
        steps = torch.arange(self.max_length, device=self.lengths.device)
        return steps.unsqueeze(0) < self.lengths.unsqueeze(-1)

    def with_data(self, data: torch.Tensor) -> "SequenceBatch":
        return SequenceBatch(data, self.lengths)
