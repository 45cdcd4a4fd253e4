#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CAESAR CIPHER FREQUENCY ANALYSER
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
Encrypts, decrypts and breaks the Caesar cipher over the English alphabet:
  1. Letter histogram of the text (case folded, non-letters ignored)
  2. Each of the 26 shifts rotates a reference English distribution
  3. Chi-squared, Euclidean or Cosine distance scores every shift
  4. The three closest shifts are decrypted and shown
"""

import sys
import math
import logging
import argparse
from pathlib import Path
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple
from dataclasses import dataclass
from functools import lru_cache
from collections import Counter

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text
from rich.logging import RichHandler
from rich import box


log = logging.getLogger('caesar')


# ═══════════════════════════════════════════════════════════════════════════════
# CONSTANTS
# ═══════════════════════════════════════════════════════════════════════════════

EN_ALPHA = 'abcdefghijklmnopqrstuvwxyz'
EN_SET   = frozenset(EN_ALPHA)
EN_SIZE  = len(EN_ALPHA)  # 26

TOP_N = 3
MAX_TEXT_LENGTH = 100000
DISTRIBUTION_FILE = 'distribution.txt'

Distribution = Tuple[float, ...]
Metric = Callable[[Sequence[float], Sequence[float]], float]


# ═══════════════════════════════════════════════════════════════════════════════
# ERRORS
# ═══════════════════════════════════════════════════════════════════════════════

class CaesarError(Exception):
    """Base class for failures reported to the user"""


class DistributionError(CaesarError):
    """Reference distribution is missing or malformed"""


class TextSourceError(CaesarError):
    """Text file could not be read"""


# ═══════════════════════════════════════════════════════════════════════════════
# DATA CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class Candidate(NamedTuple):
    """A (shift, distance) pair produced by the ranker"""
    shift: int
    distance: float

    @property
    def is_sentinel(self) -> bool:
        return self.shift < 0


SENTINEL = Candidate(shift=-1, distance=math.inf)


@dataclass(frozen=True)
class Decryption:
    """A ranked candidate together with the text it decrypts to"""
    shift: int
    distance: float
    text: Optional[str]

    @property
    def is_sentinel(self) -> bool:
        return self.shift < 0


# ═══════════════════════════════════════════════════════════════════════════════
# CIPHER
# ═══════════════════════════════════════════════════════════════════════════════

def normalize_shift(shift: int) -> int:
    """Maps any integer onto 0..25"""
    return shift % EN_SIZE


@lru_cache(maxsize=32)
def _table(shift: int) -> dict:
    lo = EN_ALPHA
    up = lo.upper()
    s_lo = ''.join(lo[(i + shift) % EN_SIZE] for i in range(EN_SIZE))
    s_up = ''.join(up[(i + shift) % EN_SIZE] for i in range(EN_SIZE))
    return str.maketrans(lo + up, s_lo + s_up)


def shift_text(text: str, shift: int, direction: str = 'encrypt') -> str:
    """
    Rotates ASCII letters within their own case by the shift.
    Everything else passes through, so the length never changes.
    """
    shift = normalize_shift(shift)
    if direction == 'decrypt':
        shift = (EN_SIZE - shift) % EN_SIZE
    elif direction != 'encrypt':
        raise ValueError(f"unknown direction: {direction!r}")
    return text.translate(_table(shift))


def encrypt(text: str, shift: int) -> str:
    return shift_text(text, shift, 'encrypt')


def decrypt(text: str, shift: int) -> str:
    return shift_text(text, shift, 'decrypt')


# ═══════════════════════════════════════════════════════════════════════════════
# HISTOGRAM
# ═══════════════════════════════════════════════════════════════════════════════

def build_histogram(text: str) -> Distribution:
    """
    Relative frequency of each letter a..z.
    All zeros when the text has no letters.
    """
    letters = [c for c in text.lower() if c in EN_SET]
    n = len(letters)
    if n == 0:
        return (0.0,) * EN_SIZE

    counts = Counter(letters)
    return tuple(counts.get(ch, 0) / n for ch in EN_ALPHA)


# ═══════════════════════════════════════════════════════════════════════════════
# DISTANCE METRICS
# ═══════════════════════════════════════════════════════════════════════════════

def chi_squared_distance(observed: Sequence[float], reference: Sequence[float]) -> float:
    """
    Sum of (o - r)^2 / r over letters the reference actually uses.
    Not symmetric: the reference always goes second.
    """
    distance = 0.0
    for o, r in zip(observed, reference):
        if r > 0:
            distance += (o - r) ** 2 / r
    return distance


def euclidean_distance(observed: Sequence[float], reference: Sequence[float]) -> float:
    return math.sqrt(sum((o - r) ** 2 for o, r in zip(observed, reference)))


def cosine_distance(observed: Sequence[float], reference: Sequence[float]) -> float:
    """1 - cosine similarity; 1.0 when either vector is all zeros"""
    dot = sum(o * r for o, r in zip(observed, reference))
    norm_o = sum(o * o for o in observed)
    norm_r = sum(r * r for r in reference)
    if norm_o == 0.0 or norm_r == 0.0:
        return 1.0

    similarity = dot / (math.sqrt(norm_o) * math.sqrt(norm_r))
    similarity = max(-1.0, min(1.0, similarity))
    return 1.0 - similarity


METRICS: Dict[str, Metric] = {
    'chi2': chi_squared_distance,
    'euclidean': euclidean_distance,
    'cosine': cosine_distance,
}

METRIC_TITLES = {
    'chi2': 'Chi-squared',
    'euclidean': 'Euclidean',
    'cosine': 'Cosine',
}


# ═══════════════════════════════════════════════════════════════════════════════
# SHIFT RANKER
# ═══════════════════════════════════════════════════════════════════════════════

def rotate(distribution: Sequence[float], shift: int) -> Distribution:
    """Moves the value of letter i to letter (i + shift) mod 26"""
    rotated = [0.0] * EN_SIZE
    for i, value in enumerate(distribution):
        rotated[(i + shift) % EN_SIZE] = value
    return tuple(rotated)


def rank_shifts(
    histogram: Sequence[float],
    reference: Sequence[float],
    metric: Metric,
    top_n: int = TOP_N,
) -> List[Candidate]:
    """
    Scores every shift and keeps the top_n smallest distances.

    A hypothesis of shift s means plaintext letter i shows up as (i + s),
    so the reference is rotated by s before comparing it with the
    ciphertext histogram. Insertion only happens on a strictly smaller
    distance: on ties the lower shift stays ahead, and NaN never gets in.
    """
    top = [SENTINEL] * top_n

    for s in range(EN_SIZE):
        distance = metric(histogram, rotate(reference, s))
        log.debug("shift %2d: distance %.6f", s, distance)

        for k in range(top_n):
            if distance < top[k].distance:
                top[k + 1:] = top[k:-1]
                top[k] = Candidate(s, distance)
                break

    log.debug("ranking: %s", ', '.join(f"{c.shift}={c.distance:.6f}" for c in top))
    return top


def crack(
    text: str,
    reference: Sequence[float],
    metric: Metric = chi_squared_distance,
    top_n: int = TOP_N,
) -> List[Decryption]:
    """Ranks the shifts of the text and decrypts each real candidate"""
    ranked = rank_shifts(build_histogram(text), reference, metric, top_n)
    return [
        Decryption(
            shift=c.shift,
            distance=c.distance,
            text=None if c.is_sentinel else decrypt(text, c.shift),
        )
        for c in ranked
    ]


# ═══════════════════════════════════════════════════════════════════════════════
# INPUT SOURCES
# ═══════════════════════════════════════════════════════════════════════════════

_SCRIPT_DIR = Path(__file__).resolve().parent


def find_distribution(name: str = DISTRIBUTION_FILE) -> Optional[Path]:
    """1. Next to the script  2. CWD  3. HOME"""
    for p in [_SCRIPT_DIR / name, Path(name), Path.home() / name]:
        if p.is_file():
            return p
    return None


def load_distribution(path) -> Distribution:
    """Reads 26 whitespace separated frequencies, a..z; extra values are ignored"""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            tokens = f.read().split()
    except OSError as e:
        raise DistributionError(f"Error opening file {path}: {e.strerror or e}") from e

    values = []
    for i, ch in enumerate(EN_ALPHA):
        try:
            values.append(float(tokens[i]))
        except (IndexError, ValueError):
            raise DistributionError(
                f"Error reading distribution for letter {ch} in {path}"
            ) from None

    log.debug("loaded reference distribution from %s", path)
    return tuple(values)


def resolve_distribution(path=None) -> Distribution:
    """Explicit path, else distribution.txt from the usual places"""
    if path is not None:
        return load_distribution(path)

    found = find_distribution()
    if found is not None:
        return load_distribution(found)

    raise DistributionError(
        f"Error opening file {DISTRIBUTION_FILE}: not found next to the script, "
        f"in the current directory or in the home directory"
    )


def read_text_file(path) -> str:
    try:
        with open(path, 'r', encoding='utf-8', errors='ignore') as f:
            return f.read(MAX_TEXT_LENGTH - 1)
    except OSError as e:
        raise TextSourceError(f"Error opening file {path}: {e.strerror or e}") from e


# ═══════════════════════════════════════════════════════════════════════════════
# UI (Rich / raw)
# ═══════════════════════════════════════════════════════════════════════════════

class UI:
    def __init__(self, raw: bool = False):
        self.c = None if raw else Console(highlight=False, emoji=False)

    def header(self):
        if self.c:
            self.c.print(Panel(
                "[bold cyan]CAESAR CIPHER FREQUENCY ANALYSER[/bold cyan]\n"
                "[dim]Chi² • Euclidean • Cosine[/dim]",
                border_style="cyan", box=box.DOUBLE
            ))
        else:
            print("=" * 40)
            print("  CAESAR CIPHER FREQUENCY ANALYSER")
            print("=" * 40)

    def menu(self):
        lines = [
            "1. Read text from keyboard",
            "2. Read text from file",
            "3. Encrypt text with a specific shift",
            "4. Decrypt text with a known shift",
            "5. Display letter frequency distribution",
            "6. Break cipher using Chi-squared distance",
            "7. Break cipher using Euclidean distance",
            "8. Break cipher using Cosine distance",
            "0. Exit",
        ]
        if self.c:
            self.c.print()
            self.c.print(Panel('\n'.join(lines), title="[bold]Caesar Cipher Menu[/bold]",
                               border_style="blue"))
        else:
            print("\n========== Caesar Cipher Menu ==========")
            for line in lines:
                print(line)

    def message(self, text: str, style: str = ""):
        if self.c:
            self.c.print(f"[{style}]{text}[/{style}]" if style else text, markup=bool(style))
        else:
            print(text)

    def error(self, text: str):
        self.message(text, "bold red")

    def ask(self, prompt: str) -> str:
        if self.c:
            return Prompt.ask(f"[bold yellow]{prompt}[/bold yellow]", console=self.c)
        return input(f"{prompt}: ")

    def labelled(self, label: str, text: str):
        if self.c:
            self.c.print(f"[bold green]{label}:[/bold green]")
            self.c.print(text, markup=False)
        else:
            print(f"{label}: {text}")

    def histogram(self, hist: Sequence[float]):
        if self.c:
            tbl = Table(box=box.SIMPLE, title="[bold]Letter Frequency Distribution[/bold]")
            tbl.add_column("Letter", width=6, style="cyan")
            tbl.add_column("Frequency", justify="right")
            tbl.add_column("")
            for ch, value in zip(EN_ALPHA, hist):
                tbl.add_row(ch, f"{value * 100:.2f}%", "█" * round(value * 100))
            self.c.print(tbl)
        else:
            print("Letter Frequency Distribution:")
            for ch, value in zip(EN_ALPHA, hist):
                print(f"{ch}: {value * 100:.2f}%")

    def candidates(self, results: List[Decryption], metric_name: str):
        title = f"Top {len(results)} most likely encryption shifts using {METRIC_TITLES[metric_name]} distance"
        if self.c:
            tbl = Table(
                box=box.ROUNDED, show_header=True,
                header_style="bold magenta", title=f"[bold]{title}[/bold]"
            )
            tbl.add_column("#", width=4, style="cyan")
            tbl.add_column("Shift", width=6, style="yellow")
            tbl.add_column("Distance", width=10)
            tbl.add_column("Decrypted")

            for i, r in enumerate(results, 1):
                if r.is_sentinel:
                    tbl.add_row(str(i), "-", "-", "")
                    continue
                preview = r.text[:60] + "…" if len(r.text) > 60 else r.text
                tbl.add_row(str(i), str(r.shift), f"{r.distance:.6f}", Text(preview))

            self.c.print(tbl)
        else:
            print(f"{title}:")
            for i, r in enumerate(results, 1):
                if r.is_sentinel:
                    print(f"{i}. Encryption Shift = -, Distance = -")
                    continue
                print(f"{i}. Encryption Shift = {r.shift}, Distance = {r.distance:.6f}")
                print(f"   Decrypted: {r.text}")


# ═══════════════════════════════════════════════════════════════════════════════
# INTERACTIVE MENU
# ═══════════════════════════════════════════════════════════════════════════════

class Menu:
    """The numbered menu loop; holds the current text between choices"""

    BREAK_CHOICES = {6: 'chi2', 7: 'euclidean', 8: 'cosine'}

    def __init__(self, ui: UI, distribution=None):
        self.ui = ui
        self.distribution = distribution
        self.text = ''
        self._reference: Optional[Distribution] = None

    @property
    def reference(self) -> Distribution:
        """Loaded on the first break request; a failure ends the program"""
        if self._reference is None:
            self._reference = resolve_distribution(self.distribution)
        return self._reference

    def loop(self):
        self.ui.header()
        while True:
            self.ui.menu()
            try:
                answer = self.ui.ask("Enter your choice")
            except EOFError:
                break
            try:
                choice = int(answer.strip())
            except ValueError:
                choice = None

            if choice == 0:
                self.ui.message("Exiting program.")
                break
            try:
                self.dispatch(choice)
            except EOFError:
                break

    def dispatch(self, choice: Optional[int]):
        if choice == 1:
            self.text = self.ui.ask(f"Enter text (max {MAX_TEXT_LENGTH - 1} characters)")[:MAX_TEXT_LENGTH - 1]
            self.ui.labelled("Text read", self.text)
        elif choice == 2:
            filename = self.ui.ask("Enter filename")
            try:
                self.text = read_text_file(filename)
            except TextSourceError as e:
                self.ui.error(str(e))
                return
            self.ui.labelled("Text read from file", self.text)
        elif choice == 3:
            if not self.text:
                self.ui.message("Please read a text first.", "yellow")
                return
            shift = self._ask_shift()
            if shift is not None:
                self.ui.labelled("Encrypted text", encrypt(self.text, shift))
        elif choice == 4:
            encrypted = self.ui.ask("Enter encrypted text")
            shift = self._ask_shift()
            if shift is not None:
                self.ui.labelled("Decrypted text", decrypt(encrypted, shift))
        elif choice == 5:
            if not self.text:
                self.ui.message("Please read a text first.", "yellow")
                return
            self.ui.histogram(build_histogram(self.text))
        elif choice in self.BREAK_CHOICES:
            name = self.BREAK_CHOICES[choice]
            encrypted = self.ui.ask("Enter encrypted text")
            self.ui.candidates(crack(encrypted, self.reference, METRICS[name]), name)
        else:
            self.ui.error("Invalid choice. Please try again.")

    def _ask_shift(self) -> Optional[int]:
        answer = self.ui.ask("Enter shift value (0-25)")
        try:
            return int(answer.strip())
        except ValueError:
            self.ui.error(f"Invalid shift: {answer!r}")
            return None


# ═══════════════════════════════════════════════════════════════════════════════
# APPLICATION
# ═══════════════════════════════════════════════════════════════════════════════

def setup_logging(verbose: bool = False):
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter('%(message)s', datefmt='[%X]'))
    log.handlers[:] = [handler]
    log.setLevel(logging.DEBUG if verbose else logging.WARNING)
    log.propagate = False


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog='caesar',
        description='Caesar Cipher Analyser: encryption, decryption and frequency analysis',
    )
    p.add_argument('-d', '--distribution', metavar='PATH',
                   help=f'Reference letter distribution (26 numbers a..z); '
                        f'default: {DISTRIBUTION_FILE} or the built-in table')
    p.add_argument('-r', '--raw', action='store_true',
                   help='Plain output without tables (handy for pipes)')
    p.add_argument('-v', '--verbose', action='store_true',
                   help='Debug logging')

    sub = p.add_subparsers(dest='command', metavar='COMMAND')

    def text_source(sp: argparse.ArgumentParser):
        sp.add_argument('text', nargs='*', help='Text (otherwise --file or stdin)')
        sp.add_argument('-f', '--file', metavar='PATH', help='Read the text from a file')

    for name, help_text in (('encrypt', 'Encrypt text with a shift'),
                            ('decrypt', 'Decrypt text with a known shift')):
        sp = sub.add_parser(name, help=help_text)
        sp.add_argument('shift', type=int, help='Shift value (any integer, taken mod 26)')
        text_source(sp)

    sp = sub.add_parser('histogram', help='Show the letter frequency distribution')
    text_source(sp)

    sp = sub.add_parser('crack', help='Rank the most likely shifts')
    text_source(sp)
    sp.add_argument('-m', '--metric', choices=[*METRICS, 'all'], default='chi2',
                    help='Distance metric (default: chi2)')

    return p.parse_args(argv)


def gather_text(args: argparse.Namespace) -> str:
    if args.file:
        return read_text_file(args.file)
    if args.text:
        return ' '.join(args.text)[:MAX_TEXT_LENGTH - 1]
    if not sys.stdin.isatty():
        return sys.stdin.read(MAX_TEXT_LENGTH - 1).rstrip('\n')
    raise CaesarError("no text given: pass it as arguments, with --file or through a pipe")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)
    ui = UI(raw=args.raw)

    if args.command in ('encrypt', 'decrypt'):
        text = gather_text(args)
        out = shift_text(text, args.shift, args.command)
        if args.raw:
            print(out)
        else:
            ui.labelled("Encrypted text" if args.command == 'encrypt' else "Decrypted text", out)
        return 0

    if args.command == 'histogram':
        ui.histogram(build_histogram(gather_text(args)))
        return 0

    if args.command == 'crack':
        text = gather_text(args)
        reference = resolve_distribution(args.distribution)
        names = list(METRICS) if args.metric == 'all' else [args.metric]
        for name in names:
            ui.candidates(crack(text, reference, METRICS[name]), name)
        return 0

    Menu(ui, args.distribution).loop()
    return 0


def run():
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nBye.")
    except CaesarError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"\n❌ {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    run()
