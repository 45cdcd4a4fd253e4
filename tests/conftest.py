from pathlib import Path

import pytest

import caesar


ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def reference():
    return caesar.load_distribution(ROOT / 'distribution.txt')


@pytest.fixture
def long_plaintext():
    """English prose long enough for its letter counts to settle."""
    return (
        "It was the best of times, it was the worst of times, it was the age of "
        "wisdom, it was the age of foolishness, it was the epoch of belief, it was "
        "the epoch of incredulity, it was the season of Light, it was the season of "
        "Darkness, it was the spring of hope, it was the winter of despair, we had "
        "everything before us, we had nothing before us, we were all going direct "
        "to Heaven, we were all going direct the other way. In short, the period "
        "was so far like the present period, that some of its noisiest authorities "
        "insisted on its being received, for good or for evil, in the superlative "
        "degree of comparison only. There were a king with a large jaw and a queen "
        "with a plain face, on the throne of England; there were a king with a "
        "large jaw and a queen with a fair face, on the throne of France."
    )
