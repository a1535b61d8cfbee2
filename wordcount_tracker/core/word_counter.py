"""
Word counting.

Counts whitespace-delimited words in a text file, ignoring annotations.
"""

import re
from typing import Pattern, Union


def count_words(path: str, annotation_pattern: Union[str, Pattern] = "") -> int:
    """Count the words in a file after stripping annotations.
    
    Every match of the annotation pattern is removed from each line before
    the remaining whitespace-delimited tokens are counted.
    
    Args:
        path: Path of the file to count
        annotation_pattern: Regular expression for text that doesn't count
        
    Returns:
        Number of words
        
    Raises:
        OSError: If the file cannot be read
    """
    regex = re.compile(annotation_pattern) if isinstance(annotation_pattern, str) else annotation_pattern
    count = 0
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        for line in f:
            line = line.rstrip("\r\n")
            if regex.pattern:
                line = regex.sub("", line)
            count += len(line.split())
    return count
