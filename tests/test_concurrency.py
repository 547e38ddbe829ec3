import threading
from concurrent.futures import ThreadPoolExecutor

from errtrail import Error, annotate, new

WORKERS = 32


def test_concurrent_annotation_yields_independent_records() -> None:
    base = new("shared").annotate("prefix")
    before = base.trail
    barrier = threading.Barrier(WORKERS)

    def work(index: int) -> Error:
        barrier.wait()
        if index % 2:
            return base.annotate(index)
        result = annotate(base, index)
        assert result is not None
        return result

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        results = list(pool.map(work, range(WORKERS)))

    assert len({id(result) for result in results}) == WORKERS
    for index, result in enumerate(results):
        assert result.code == "shared"
        assert len(result.trail) == len(before) + 1
        assert result.trail[:-1] == before
        assert result.trail[-1][1:] == (index,)
    assert base.trail == before
