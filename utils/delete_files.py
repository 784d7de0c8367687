import logging

import aiofiles.os

logger = logging.getLogger(__name__)


async def delete_files(files=None):
    """
    Asynchronously deletes temporary files.

    Missing files are skipped silently, a frame that was never written is
    not an error.

    :param files: List of filenames to delete. Defaults to None.
    :return: List of successfully deleted files.
    """
    if files is None:
        files = []

    deleted_files = []

    for filename in files:
        if filename is None:
            continue
        try:
            if await aiofiles.os.path.exists(filename):
                await aiofiles.os.remove(filename)
                deleted_files.append(filename)
                logger.debug(f"Deleted file: {filename}")
        except OSError as e:
            logger.error(f"Error deleting file {filename}: {e}")

    return deleted_files
