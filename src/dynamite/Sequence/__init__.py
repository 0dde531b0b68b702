from dynamite.Sequence.recurrence import recurrence, last, fold, map, embedding
from dynamite.Sequence.unrolled import unrolled_recurrence, bi_recurrence
