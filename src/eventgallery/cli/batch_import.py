import os
from collections.abc import Iterator

import structlog
from dotenv import load_dotenv
from invoke import Context, task

from eventgallery.config import get_storage_backend
from eventgallery.logging_config import configure_structured_logging
from eventgallery.services.ingest import ingest_files
from eventgallery.services.photo_store import PhotoStore
from eventgallery.services.transcoder import BatchResult
from eventgallery.storage.factory import build_key_value_store

logger = structlog.get_logger()

SUPPORTED_EXTENSIONS = [".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp", ".heic", ".heif"]


def find_image_files(directory: str, recursive: bool = False) -> list[str]:
    """Return image paths under ``directory`` in sorted order."""
    image_files = []
    if recursive:
        for root, _, files in os.walk(directory):
            for name in files:
                if os.path.splitext(name)[1].lower() in SUPPORTED_EXTENSIONS:
                    image_files.append(os.path.join(root, name))
    else:
        for name in os.listdir(directory):
            path = os.path.join(directory, name)
            if os.path.isfile(path) and os.path.splitext(name)[1].lower() in SUPPORTED_EXTENSIONS:
                image_files.append(path)

    return sorted(image_files)


def read_image_file(file_path: str) -> bytes:
    with open(file_path, "rb") as f:
        return f.read()


def iter_image_files(image_files: list[str]) -> Iterator[tuple[str, bytes]]:
    """
    Yield (filename, bytes) pairs, reading each file only when it is requested.

    Only the file currently being transcoded is held in memory.
    """
    for file_path in image_files:
        yield os.path.basename(file_path), read_image_file(file_path)


@task
def batch_import(
    c: Context,
    directory: str,
    env_file: str = ".env",
    recursive: bool = False,
    dry_run: bool = False,
) -> BatchResult | None:
    """
    Import images from a local directory into the gallery as one batch.

    Args:
        c (Context): Invoke context.
        directory (str): Path to the directory containing images.
        env_file (str): Path to the environment file. Default is '.env'.
        recursive (bool): Search for images in subdirectories. Default is False.
        dry_run (bool): If True, lists files to be processed without importing. Default is False.
    """
    if os.path.exists(env_file):
        logger.info("loading_env_file", env_file=env_file)
        load_dotenv(dotenv_path=env_file)
    else:
        logger.warning("env_file_not_found", env_file=env_file)

    configure_structured_logging(component="batch_import", storage_backend=get_storage_backend())

    if not os.path.isdir(directory):
        logger.error("directory_not_found", directory=directory)
        return None

    logger.info("batch_import_started", directory=directory, recursive=recursive, dry_run=dry_run)

    image_files = find_image_files(directory, recursive=recursive)
    if not image_files:
        logger.warning("no_image_files_found", directory=directory)
        return None

    logger.info("image_files_found", count=len(image_files))

    if dry_run:
        print("\n--- Dry Run Mode: Files to be imported ---")
        for file_path in image_files:
            print(f"- {file_path}")
        print("--- End of Dry Run ---")
        return None

    with build_key_value_store() as backend:
        photo_store = PhotoStore(backend)
        result = ingest_files(iter_image_files(image_files), photo_store)

        logger.info(
            "batch_import_finished",
            successful=result.success_count,
            failed=result.failure_count,
            total=len(image_files),
            photo_count=len(photo_store),
        )

    print(f"\nBatch import complete. Successful: {result.success_count}, Failed: {result.failure_count}")
    return result
