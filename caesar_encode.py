#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Encrypts text with the Caesar cipher"""

import sys
from typing import List, Optional

from caesar import encrypt, normalize_shift


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) < 2:
        print("Usage: python3 caesar_encode.py <shift> <text>")
        print("Example: python3 caesar_encode.py 3 'hello world'")
        return 1

    try:
        key = int(argv[0])
    except ValueError:
        print("❌ Error: the shift must be an integer")
        return 1

    text = ' '.join(argv[1:])
    print(f"Shift: {key} (effective {normalize_shift(key)})")
    print(f"Plain text: {text}")
    print(f"Encrypted: {encrypt(text, key)}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
