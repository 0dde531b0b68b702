"""
A dataset over the CNTK text format.

Each line reads

    <sequence id> |<alias> <values> |<alias> <values> ...

Lines sharing a sequence id belong to the same sequence, one sample
per line per stream mentioned. Sparse streams list index:value pairs,
dense streams list every value. A field whose alias starts with '#'
is a comment. A line without an id starts a sequence of its own.

Only parsing lives here. Batching, ordering and worker processes
are left to torch's DataLoader.
"""
from dataclasses import dataclass
from typing import Dict, List, Sequence

import torch
from torch.utils.data import Dataset

from dynamite import Core


@dataclass(frozen=True)
class StreamInformation:
    """
    Describes one input stream.

    name: The name the stream is known by in a minibatch
    dim: The width of one sample
    is_sparse: Whether the file lists index:value pairs
    alias: The name used in the file
    is_sequence: False for streams holding exactly one sample per sequence
    """
    name: str
    dim: int
    is_sparse: bool
    alias: str
    is_sequence: bool = True


def _parse_sample(values: List[str], stream: StreamInformation, location: str) -> torch.Tensor:
    sample = torch.zeros([stream.dim], dtype=torch.float32)
    try:
        if stream.is_sparse:
            for entry in values:
                position, _, value = entry.partition(":")
                position = int(position)
                if position < 0 or position >= stream.dim:
                    reason = f"Index {position} is outside the dimension {stream.dim} of stream '{stream.alias}'"
                    raise Core.DataFormatException(reason, location)
                sample[position] = float(value) if value else 1.0
        else:
            if len(values) != stream.dim:
                reason = f"""\
                Dense stream '{stream.alias}' expects {stream.dim} values per
                sample, but {len(values)} were found.
                """
                raise Core.DataFormatException(Core.dedent(reason), location)
            sample = torch.tensor([float(value) for value in values], dtype=torch.float32)
    except ValueError as err:
        raise Core.DataFormatException(f"Malformed value in stream '{stream.alias}': {err}", location) from err
    return sample


def parse_ctf(lines: Sequence[str], streams: Sequence[StreamInformation]) -> List[Dict[str, torch.Tensor]]:
    """
    Parses lines of text format data into sequences.

    :param lines: The lines of the file
    :param streams: The streams to extract. Aliases not listed are an error.
    :return: One dict per sequence, stream name -> tensor [samples, dim]
    """
    by_alias = {stream.alias: stream for stream in streams}
    sequences: List[Dict[str, List[torch.Tensor]]] = []
    current_id = None

    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        location = "Parsing line %d" % line_number

        sequence_id, *fields = line.split("|")
        sequence_id = sequence_id.strip()
        if not sequence_id or sequence_id != current_id:
            sequences.append({stream.name: [] for stream in streams})
            current_id = sequence_id

        for field in fields:
            if not field.strip():
                continue
            alias, *values = field.split()
            if alias.startswith("#"):
                continue
            if alias not in by_alias:
                raise Core.DataFormatException(f"Unknown stream alias '{alias}'", location)
            stream = by_alias[alias]
            sequences[-1][stream.name].append(_parse_sample(values, stream, location))

    output: List[Dict[str, torch.Tensor]] = []
    for position, sequence in enumerate(sequences):
        item = {}
        for stream in streams:
            samples = sequence[stream.name]
            if len(samples) == 0:
                reason = f"Sequence {position} holds no samples for stream '{stream.alias}'"
                raise Core.DataFormatException(reason, "Assembling sequences")
            item[stream.name] = torch.stack(samples, dim=0)
        output.append(item)
    return output


class CTFDataset(Dataset):
    """
    Holds every sequence of a text format file. Each item is a
    dict of stream name -> tensor [samples, dim].
    """
    def __init__(self, path: str, streams: Sequence[StreamInformation]):
        self.path = path
        self.streams = list(streams)
        with open(path, "r", encoding="utf-8") as file:
            self.sequences = parse_ctf(file.readlines(), self.streams)

    def __len__(self) -> int:
        return len(self.sequences)

    def __getitem__(self, item: int) -> Dict[str, torch.Tensor]:
        return self.sequences[item]

    def lengths(self, stream_name: str) -> List[int]:
        return [sequence[stream_name].shape[0] for sequence in self.sequences]
