"""
Module: layout.metrics

Purpose:
    Font resolution and text measurement for the print layout. Styled runs
    are flowed into lines here once; the composer uses the line heights
    for pagination and the renderer draws the same lines, so measured and
    painted output cannot drift apart.

Key Classes:
    - FontSet: Regular/bold/italic PDF font names for one profile
    - Fragment: A measured piece of a styled run on one line
    - FlowLine: One laid-out line

Key Functions:
    - register_fonts(): Register script TTF fonts with ReportLab
    - discover_script_fonts(): Find and register a profile's font on disk
    - resolve_fonts(): Fonts for a ScriptProfile (built-in fallback)
    - shape_rtl(): Contextual letter forms in visual order
    - flow_runs(): Greedy word flow of styled runs into lines

Dependencies:
    - reportlab.pdfbase.pdfmetrics: String widths, font registry
    - reportlab.pdfbase.ttfonts: TTF registration
    - arabic_reshaper, bidi: Arabic-script shaping (ReportLab draws
      code points as-is)

Used By:
    - layout.composer
    - output.renderer
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import arabic_reshaper
from bidi.algorithm import get_display
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from paper_composer.core.models import ScriptProfile
from paper_composer.text.formatter import StyledRun, VerticalAlign

logger = logging.getLogger(__name__)

FALLBACK_REGULAR = "Helvetica"
FALLBACK_BOLD = "Helvetica-Bold"
FALLBACK_ITALIC = "Helvetica-Oblique"

# Extra font directories, searched first (os.pathsep separated)
FONT_DIR_ENV = "PAPER_COMPOSER_FONT_DIR"
BUNDLED_FONT_DIR = Path(__file__).resolve().parent.parent / "fonts"
SYSTEM_FONT_DIRS = (
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path.home() / ".fonts",
    Path.home() / ".local" / "share" / "fonts",
    Path("/Library/Fonts"),
    Path.home() / "Library" / "Fonts",
    Path("C:/Windows/Fonts"),
)

# (regular, bold) file candidates per profile font name, best first
SCRIPT_FONT_FILES: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "NotoNastaliqUrdu": (
        ("NotoNastaliqUrdu-Regular.ttf", "NotoNastaliqUrdu-Bold.ttf"),
        ("NotoNaskhArabic-Regular.ttf", "NotoNaskhArabic-Bold.ttf"),
        ("NotoSansArabic-Regular.ttf", "NotoSansArabic-Bold.ttf"),
        ("DejaVuSans.ttf", "DejaVuSans-Bold.ttf"),
        ("FreeSerif.ttf", "FreeSerifBold.ttf"),
    ),
    "NotoNaskhArabic": (
        ("NotoNaskhArabic-Regular.ttf", "NotoNaskhArabic-Bold.ttf"),
        ("NotoSansArabic-Regular.ttf", "NotoSansArabic-Bold.ttf"),
        ("Amiri-Regular.ttf", "Amiri-Bold.ttf"),
        ("DejaVuSans.ttf", "DejaVuSans-Bold.ttf"),
        ("FreeSerif.ttf", "FreeSerifBold.ttf"),
    ),
}

# Logical (unshaped) Hebrew and Arabic-script code points
_SHAPE_RE = re.compile(r"[\u0590-\u08FF]")

# Offsets relative to the base font size
SUPERSCRIPT_RISE = 0.45
SUBSCRIPT_RISE = -0.25
OPERATOR_PADDING_EM = 0.25

_CHUNK_RE = re.compile(r"(\s+)")


@dataclass(frozen=True)
class FontSet:
    regular: str
    bold: str
    italic: str


def register_fonts(font_paths: Mapping[str, Path]) -> List[str]:
    """
    Register TTF fonts under the given names.

    Fonts that cannot be loaded are skipped with a warning; the profile
    using them then falls back to the built-in fonts.

    Args:
        font_paths: Mapping of font name -> TTF path,
            e.g. {"NotoNaskhArabic": Path("fonts/NotoNaskhArabic.ttf")}

    Returns:
        Names that are registered after the call
    """
    registered = []
    for name, path in font_paths.items():
        if name in pdfmetrics.getRegisteredFontNames():
            registered.append(name)
            continue
        try:
            pdfmetrics.registerFont(TTFont(name, str(path)))
        except (OSError, TTFError) as e:
            logger.warning(f"Failed to register font {name} from {path}: {e}")
            continue
        logger.debug(f"Registered font {name} from {path}")
        registered.append(name)
    return registered


def font_available(name: str) -> bool:
    """True for standard PDF fonts and registered TTF fonts."""
    return name in pdfmetrics.standardFonts or name in pdfmetrics.getRegisteredFontNames()


def font_search_dirs() -> List[Path]:
    """Directories searched for script fonts, in priority order."""
    extra = [Path(p) for p in os.environ.get(FONT_DIR_ENV, "").split(os.pathsep) if p]
    return extra + [BUNDLED_FONT_DIR, *SYSTEM_FONT_DIRS]


@lru_cache(maxsize=8)
def _font_index(search_dirs: Tuple[Path, ...]) -> Dict[str, Path]:
    """Map lowercase TTF file name -> first path found."""
    index: Dict[str, Path] = {}
    for directory in search_dirs:
        if not directory.is_dir():
            continue
        try:
            for path in sorted(directory.rglob("*.[tT][tT][fF]")):
                index.setdefault(path.name.lower(), path)
        except OSError as e:
            logger.debug(f"Cannot scan font directory {directory}: {e}")
    return index


def _covers(font: TTFont, sample: str) -> bool:
    """True if the font has a glyph for every shaped character of sample."""
    cmap = font.face.charToGlyph
    return all(ord(ch) in cmap for ch in shape_rtl(sample) if not ch.isspace())


def _load_font(name: str, path: Path) -> Optional[TTFont]:
    try:
        return TTFont(name, str(path))
    except (OSError, TTFError) as e:
        logger.debug(f"Skipped font {path}: {e}")
        return None


def discover_script_fonts(
    profile: ScriptProfile,
    search_dirs: Optional[Sequence[Path]] = None,
) -> bool:
    """
    Find a TTF for the profile's font and register it under font_name.

    Candidates come from SCRIPT_FONT_FILES (or "<font_name>-Regular.ttf"
    for other names). A candidate is taken only if it has glyphs for the
    profile's shaped question label. A matching bold file is registered
    as "<font_name>-Bold".

    Args:
        profile: Script profile whose font is needed
        search_dirs: Directories to search (default font_search_dirs())

    Returns:
        True if font_name is registered after the call
    """
    name = profile.font_name
    if font_available(name):
        return True

    dirs = tuple(Path(d) for d in (search_dirs if search_dirs is not None else font_search_dirs()))
    index = _font_index(dirs)
    candidates = SCRIPT_FONT_FILES.get(name, ((f"{name}-Regular.ttf", f"{name}-Bold.ttf"),))

    for regular_file, bold_file in candidates:
        path = index.get(regular_file.lower())
        if path is None:
            continue
        font = _load_font(name, path)
        if font is None or not _covers(font, profile.labels.question):
            logger.debug(f"Font {path} lacks glyphs for {profile.language.value}")
            continue
        pdfmetrics.registerFont(font)
        logger.info(f"Using {path} for {name}")

        bold_path = index.get(bold_file.lower())
        bold = _load_font(f"{name}-Bold", bold_path) if bold_path else None
        if bold is not None and _covers(bold, profile.labels.question):
            pdfmetrics.registerFont(bold)
        return True
    return False


def resolve_fonts(profile: ScriptProfile, search_dirs: Optional[Sequence[Path]] = None) -> FontSet:
    """
    Return the PDF fonts to use for a profile.

    A script font that is not registered yet is looked up on disk first.
    A registered script font is used for every style (bold from
    "<name>-Bold" when registered). Otherwise Helvetica is used, with a
    warning for right-to-left profiles since Helvetica has no glyphs for
    their script.
    """
    name = profile.font_name
    if name == FALLBACK_REGULAR or not discover_script_fonts(profile, search_dirs):
        if name != FALLBACK_REGULAR:
            log = logger.warning if profile.is_rtl else logger.debug
            log(
                f"No font found for {name} ({profile.language.value}); "
                f"falling back to {FALLBACK_REGULAR}. Install the font or set {FONT_DIR_ENV}"
            )
        return FontSet(FALLBACK_REGULAR, FALLBACK_BOLD, FALLBACK_ITALIC)
    bold = f"{name}-Bold"
    return FontSet(regular=name, bold=bold if font_available(bold) else name, italic=name)


def shape_rtl(text: str) -> str:
    """
    Shape Arabic-script text for drawing.

    Letters are replaced with their joined presentation forms and the
    string is put in visual (left-to-right painting) order. Text without
    right-to-left letters (including already shaped text) is returned
    unchanged.

    Example:
        >>> shape_rtl("abc")
        'abc'
    """
    if not _SHAPE_RE.search(text):
        return text
    return get_display(arabic_reshaper.reshape(text))


def measure(text: str, font: str, size: float) -> float:
    """Width of text in points, as drawn (shaped)."""
    return pdfmetrics.stringWidth(shape_rtl(text), font, size)


@dataclass(frozen=True)
class Fragment:
    """
    Measured piece of text on a line.

    Attributes:
        text: Text to draw
        font: PDF font name
        size: Font size in points
        rise: Baseline offset in points (positive = up)
        width: Advance width including padding
        padding: Space added before and after the glyphs
    """

    text: str
    font: str
    size: float
    rise: float
    width: float
    padding: float = 0.0

    @property
    def is_space(self) -> bool:
        return self.text.isspace()


@dataclass(frozen=True)
class FlowLine:
    fragments: tuple[Fragment, ...]
    width: float
    height: float

    @property
    def text(self) -> str:
        return "".join(f.text for f in self.fragments)


def _fragment(text: str, run: StyledRun, fonts: FontSet, base_size: float, bold: bool) -> Fragment:
    style = run.style
    if bold:
        font = fonts.bold
    elif style.italic:
        font = fonts.italic
    else:
        font = fonts.regular
    size = base_size * style.scale
    if style.vertical is VerticalAlign.SUPER:
        rise = base_size * SUPERSCRIPT_RISE
    elif style.vertical is VerticalAlign.SUB:
        rise = base_size * SUBSCRIPT_RISE
    else:
        rise = 0.0
    padding = size * OPERATOR_PADDING_EM if style.padded else 0.0
    width = measure(text, font, size) + 2 * padding
    return Fragment(text=text, font=font, size=size, rise=rise, width=width, padding=padding)


def flow_runs(
    runs: Iterable[StyledRun],
    max_width: float,
    fonts: FontSet,
    base_size: float,
    *,
    line_height: float = 1.2,
    bold: bool = False,
) -> List[FlowLine]:
    """
    Flow styled runs into lines no wider than max_width.

    Whitespace separates words; a word made of several runs (e.g. "x" and
    a superscript "2") is never split. "\\n" forces a line break. A word
    wider than max_width gets a line of its own.

    Args:
        runs: Styled runs in logical order
        max_width: Line width in points
        fonts: Fonts from resolve_fonts()
        base_size: Base font size in points
        line_height: Line height multiplier
        bold: Draw every run in the bold face

    Returns:
        Lines in order; [] when there is no visible text
    """
    lines: List[FlowLine] = []
    line: List[Fragment] = []
    line_width = 0.0
    word: List[Fragment] = []
    pending_space: Optional[Fragment] = None
    row_height = base_size * line_height

    def end_line() -> None:
        nonlocal line, line_width
        lines.append(FlowLine(tuple(line), line_width, row_height))
        line = []
        line_width = 0.0

    def place_word() -> None:
        nonlocal line_width, pending_space
        if not word:
            return
        word_width = sum(f.width for f in word)
        space_width = pending_space.width if (pending_space and line) else 0.0
        if line and line_width + space_width + word_width > max_width:
            end_line()
            space_width = 0.0
        if space_width:
            line.append(pending_space)
        line.extend(word)
        line_width += space_width + word_width
        word.clear()
        pending_space = None

    for run in runs:
        for chunk in _CHUNK_RE.split(run.text):
            if not chunk:
                continue
            if not chunk.isspace():
                word.append(_fragment(chunk, run, fonts, base_size, bold))
                continue
            place_word()
            for _ in range(chunk.count("\n")):
                end_line()
                pending_space = None
            if "\n" not in chunk and line:
                pending_space = _fragment(" ", run, fonts, base_size, bold)

    place_word()
    if line:
        end_line()
    return lines


def lines_height(lines: Iterable[FlowLine]) -> float:
    """Total height of laid-out lines."""
    return sum(line.height for line in lines)
