"""Example benchmark script: run with ``giglio examples/sorting.py --reps 100``.

``module`` and ``time`` are provided by giglio when it loads the script.
"""

import random


def make_data(ctx, params):
    rng = random.Random(params["seed"])
    ctx.data = [rng.random() for _ in range(params["size"])]


def drop_data(ctx):
    del ctx.data


module(  # noqa: F821
    "sorting",
    parameters={"size": [100, 10_000], "seed": [1]},
    setup=make_data,
    teardown=drop_data,
)


def builtin_sorted(ctx, reps):
    for _ in range(reps):
        sorted(ctx.data)


def heap_sort(ctx, reps):
    import heapq

    for _ in range(reps):
        heap = list(ctx.data)
        heapq.heapify(heap)
        [heapq.heappop(heap) for _ in range(len(heap))]


time("sorted()", builtin_sorted)  # noqa: F821
time("heapq", heap_sort)  # noqa: F821
