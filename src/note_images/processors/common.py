"""Common functions shared across the batch processor implementations."""

import time
from pathlib import Path
from typing import Callable, List, Sequence, Set, Tuple

from ..core import (
    ImageOptions,
    NoteImagesError,
    ShrinkResult,
    UploadItem,
    get_logger,
    process_image,
)

ProcessBatchFunction = Callable[[List[UploadItem], ImageOptions], List[ShrinkResult]]


def output_path(dest_path: str, extension: str) -> Path:
    """Destination path with the suffix replaced by the final format's extension."""
    return Path(dest_path).with_suffix(f".{extension}")


def shrink_file(item: UploadItem, options: ImageOptions) -> ShrinkResult:
    """Read → Process → Write one local file, capturing failures in the result."""
    logger = get_logger("processor")
    start_time = time.time()
    result = ShrinkResult(source_path=item.source_path)

    try:
        data = Path(item.source_path).read_bytes()
        result.original_size = len(data)

        processed = process_image(
            data,
            Path(item.source_path).name,
            True,
            options.resize_config(),
            options.optimize_config(),
        )

        destination = output_path(item.dest_path, processed.format.extension)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(processed.buffer)

        result.dest_path = str(destination)
        result.final_size = processed.size
        result.format = processed.format.extension
        result.success = True
        logger.debug(
            f"[{item.source_path}] {result.original_size:,} -> {result.final_size:,} bytes"
        )
    except (NoteImagesError, OSError) as e:
        result.error = str(e)
        logger.error(f"[{item.source_path}] Failed due to {type(e).__name__}: {e}")

    result.processing_time = time.time() - start_time
    return result


def create_work_items(source_files: Sequence[str], out_dir: str) -> List[UploadItem]:
    """
    Map every source file to a file under ``out_dir``.

    The output suffix is only known after processing, so destinations are
    kept apart by stem: ``a/photo.jpg``, ``b/photo.jpg`` and ``photo.png``
    become ``photo``, ``photo-1`` and ``photo-2``.
    """
    items: List[UploadItem] = []
    taken_stems: Set[str] = set()

    for source in source_files:
        path = Path(source)
        stem = path.stem
        counter = 1
        # Compared case-insensitively: "Photo" and "photo" collide on some filesystems.
        while stem.lower() in taken_stems:
            stem = f"{path.stem}-{counter}"
            counter += 1
        taken_stems.add(stem.lower())

        items.append(
            UploadItem(
                source_path=source,
                dest_path=str(Path(out_dir) / f"{stem}{path.suffix}"),
            )
        )

    return items


def failed_result(item: UploadItem, error: Exception) -> ShrinkResult:
    """Result for an item whose processing raised outside ``shrink_file``."""
    get_logger("processor").error(
        f"[{item.source_path}] Unexpected {type(error).__name__}: {error}"
    )
    return ShrinkResult(
        source_path=item.source_path,
        dest_path=item.dest_path,
        success=False,
        error=str(error),
    )


def count_results(results: List[ShrinkResult]) -> Tuple[int, int]:
    """Return (succeeded, failed) counts."""
    succeeded = sum(1 for result in results if result.success)
    return succeeded, len(results) - succeeded


def log_configuration(options: ImageOptions, processor_name: str, out_dir: str) -> None:
    logger = get_logger("processor")
    logger.info("=" * 60)
    logger.info(f"{processor_name.upper()} IMAGE SHRINKER")
    logger.info("=" * 60)
    logger.info(f"  Output directory: {out_dir}")
    logger.info(f"  Max dimension:    {options.max_width_height}px")
    logger.info(f"  JPEG quality:     {options.jpeg_quality}")
    logger.info(
        f"  PNG quality:      {options.png_quality_min}-{options.png_quality_max}"
    )
    logger.info(f"  GIF lossy:        {options.gif_lossy}")
    logger.info("=" * 60)


def log_final_statistics(total_time: float, results: List[ShrinkResult]) -> None:
    logger = get_logger("processor")
    succeeded, failed = count_results(results)
    original = sum(result.original_size for result in results if result.success)
    final = sum(result.final_size for result in results if result.success)

    logger.info("=" * 60)
    logger.info("SHRINKING COMPLETED")
    logger.info(f"Total execution time: {total_time:.1f}s")
    logger.info(f"Successfully processed: {succeeded}")
    logger.info(f"Errors encountered: {failed}")
    logger.info(f"Bytes: {original:,} -> {final:,}")
    logger.info("=" * 60)


def run_processing(
    source_files: Sequence[str],
    out_dir: str,
    options: ImageOptions,
    processor_name: str,
    process_batch_fn: ProcessBatchFunction,
) -> List[ShrinkResult]:
    """Shrink ``source_files`` into ``out_dir`` with the given batch strategy."""
    log_configuration(options, processor_name, out_dir)
    start_time = time.time()

    work_items = create_work_items(source_files, out_dir)
    results = process_batch_fn(work_items, options)

    log_final_statistics(time.time() - start_time, results)
    return results
