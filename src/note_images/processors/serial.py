"""Serial processor implementation - shrinks files one by one."""

from typing import List

from ..core import ImageOptions, ShrinkResult, UploadItem
from .common import failed_result, shrink_file


def process_batch(batch: List[UploadItem], options: ImageOptions) -> List[ShrinkResult]:
    """
    Shrink a batch of files serially in the current thread.

    Args:
        batch: Files to shrink.
        options: Image options shared by every file.

    Returns:
        One `ShrinkResult` per item, in input order.
    """
    results = []

    for item in batch:
        try:
            results.append(shrink_file(item, options))
        except Exception as e:
            results.append(failed_result(item, e))

    return results
