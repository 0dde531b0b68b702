from dynamite.Data.ctf import StreamInformation, CTFDataset, parse_ctf
from dynamite.Data.minibatch import (StreamData,
                                     Minibatch,
                                     SampleCountBatchSampler,
                                     collate_minibatch,
                                     create_minibatch_source)
from dynamite.Data.conversion import from_packed_minibatch, to_sequence_batch, to_dense_batch
