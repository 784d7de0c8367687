import logging
from pathlib import Path
from typing import Iterable, List, Union

from utils.caption import CAPTION_EXTENSION

logger = logging.getLogger(__name__)


def _scan_directory(directory: Path, recursive: bool) -> List[Path]:
    pattern = "**/*" if recursive else "*"
    return sorted(
        p for p in directory.glob(pattern)
        if p.is_file() and p.suffix.lower() != CAPTION_EXTENSION
    )


def collect_files(inputs: Iterable[Union[str, Path]], recursive: bool = False) -> List[Path]:
    """
    Expand command line inputs into the ordered list of files to upload.

    Files are kept in the given order, directories are replaced by their
    files sorted by path. Caption sidecars inside directories are skipped.
    """
    files: List[Path] = []
    for item in inputs:
        path = Path(item)
        if path.is_dir():
            found = _scan_directory(path, recursive)
            logger.info(f"Found {len(found)} files in {path}")
            files.extend(found)
        elif path.is_file():
            files.append(path)
        else:
            logger.warning(f"File not found: {path}")
    return files
