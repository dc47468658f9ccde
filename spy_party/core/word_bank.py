"""
Word bank loading.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

WORDS_PATH = Path(__file__).resolve().parent.parent / "data" / "words.txt"


def load_words(path: Optional[Union[str, Path]] = None) -> List[str]:
    """
    Load one word per line, skipping blanks and duplicates.

    Returns an empty list when the file cannot be read; picking from an
    empty bank fails later with EmptyPoolError.
    """
    words_path = Path(path) if path is not None else WORDS_PATH
    try:
        raw_lines = words_path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        logger.error("Could not read word bank %s: %s", words_path, e)
        return []

    words: List[str] = []
    seen = set()
    for line in raw_lines:
        word = line.strip()
        if not word or word.startswith("#") or word in seen:
            continue
        seen.add(word)
        words.append(word)
    logger.debug("Loaded %d words from %s", len(words), words_path)
    return words
