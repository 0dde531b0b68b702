"""
Minibatching. Minibatch size is counted in samples of the
first stream, not in sequences, and each stream of a minibatch
is delivered packed.
"""
import functools
from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence

import torch
from torch.nn.utils import rnn
from torch.utils.data import DataLoader, Sampler

from dynamite.Data.ctf import CTFDataset, StreamInformation


@dataclass
class StreamData:
    """One stream of a minibatch"""
    data: rnn.PackedSequence
    number_of_sequences: int
    number_of_samples: int

    def to(self, device: torch.device) -> "StreamData":
        return StreamData(self.data.to(device), self.number_of_sequences, self.number_of_samples)


Minibatch = Dict[str, StreamData]


class SampleCountBatchSampler(Sampler):
    """
    Groups consecutive sequences into minibatches of about
    minibatch_size samples. Sequences are added while the total
    stays within budget; a sequence longer than the budget on its
    own still forms a minibatch.
    """
    def __init__(self, lengths: Sequence[int], minibatch_size: int):
        if minibatch_size < 1:
            raise ValueError("minibatch_size must be positive, got %d" % minibatch_size)
        self.lengths = list(lengths)
        self.minibatch_size = minibatch_size
        self.batches = self._plan()

    def _plan(self) -> List[List[int]]:
        batches: List[List[int]] = []
        current: List[int] = []
        samples = 0
        for position, length in enumerate(self.lengths):
            if current and samples + length > self.minibatch_size:
                batches.append(current)
                current = []
                samples = 0
            current.append(position)
            samples += length
        if current:
            batches.append(current)
        return batches

    def __iter__(self) -> Iterator[List[int]]:
        return iter(self.batches)

    def __len__(self) -> int:
        return len(self.batches)


def collate_minibatch(items: List[Dict[str, torch.Tensor]],
                      streams: Sequence[StreamInformation]) -> Minibatch:
    minibatch = {}
    for stream in streams:
        sequences = [item[stream.name] for item in items]
        minibatch[stream.name] = StreamData(rnn.pack_sequence(sequences, enforce_sorted=False),
                                            len(sequences),
                                            sum(sequence.shape[0] for sequence in sequences))
    return minibatch


def create_minibatch_source(path: str,
                            streams: Sequence[StreamInformation],
                            minibatch_size: int,
                            num_workers: int = 0) -> DataLoader:
    """
    Makes a loader doing one full sweep over a text format file.

    :param path: The file to read
    :param streams: The streams to read. The first one sets the sample count.
    :param minibatch_size: The number of samples per minibatch
    :param num_workers: Worker processes for the loader
    :return: A DataLoader yielding Minibatch dicts
    """
    streams = list(streams)
    dataset = CTFDataset(path, streams)
    sampler = SampleCountBatchSampler(dataset.lengths(streams[0].name), minibatch_size)
    return DataLoader(dataset,
                      batch_sampler=sampler,
                      collate_fn=functools.partial(collate_minibatch, streams=streams),
                      num_workers=num_workers)
