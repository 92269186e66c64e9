"""Multithreaded processor implementation - uses a thread pool for parallelism."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List

from ..core import ImageOptions, ShrinkResult, UploadItem
from .common import failed_result, shrink_file

MAX_WORKERS = 8


def process_batch(batch: List[UploadItem], options: ImageOptions) -> List[ShrinkResult]:
    """
    Shrink a batch of files on a thread pool.

    Each file runs through its own independent pipeline; Pillow releases the
    GIL while decoding and encoding. Results come back in completion order.

    Args:
        batch: Files to shrink.
        options: Image options shared by every file (read-only).

    Returns:
        One `ShrinkResult` per item.
    """
    results: List[ShrinkResult] = []
    if not batch:
        return results

    max_workers = min(MAX_WORKERS, len(batch))

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_item = {
            executor.submit(shrink_file, item, options): item for item in batch
        }

        for future in as_completed(future_to_item):
            try:
                results.append(future.result())
            except Exception as e:
                results.append(failed_result(future_to_item[future], e))

    return results
