# utils.py
from typing import Iterable, Iterator, List


def chunks(iterable: Iterable, size: int) -> Iterator[List]:
    lst = list(iterable)
    for i in range(0, len(lst), size):
        yield lst[i:i+size]
