from collections import namedtuple
import re

from .errors import FormatError


_BOOK = r'[^\s:,=][^\s:,]*'
_VERSE = r'[0-9A-Za-z.]+'
_reference_re = re.compile(r'(%s) (\d+):(%s)$' % (_BOOK, _VERSE))
_range_re = re.compile(r'(%s) (\d+):(\d+)-(\d+)$' % (_BOOK,))
_verse_re = re.compile(_VERSE + '$')
_book_re = re.compile(_BOOK + '$')


class Reference(namedtuple('Reference', 'book chapter verse')):
    __slots__ = ()

    def __str__(self):
        return '%s %d:%s' % (self.book, self.chapter, self.verse)

    @property
    def verse_number(self):
        """Returns the verse as an integer when it is written canonically
        (digits only, no leading zero), and None otherwise.
        """
        return verse_number(self.verse)

    def next_verse(self):
        """Returns the reference to the following numbered verse in the same
        chapter, or None for verses that are not plain numbers.
        """
        number = self.verse_number
        if number is None:
            return None
        return Reference(self.book, self.chapter, str(number + 1))


def verse_number(verse):
    if verse.isascii() and verse.isdigit() and str(int(verse)) == verse:
        return int(verse)
    return None


def is_valid_book(book):
    return bool(_book_re.match(book))


def is_valid_verse(verse):
    return bool(_verse_re.match(verse))


def is_valid_reference(reference):
    if not isinstance(reference, Reference):
        return False
    book, chapter, verse = reference
    return (isinstance(book, str) and is_valid_book(book) and
            isinstance(chapter, int) and chapter >= 0 and
            isinstance(verse, str) and is_valid_verse(verse))


def parse_reference(text):
    m = _reference_re.match(text)
    if not m:
        raise FormatError("Invalid reference: %r" % (text,))
    return Reference(m.group(1), int(m.group(2)), m.group(3))


def expand_verse_range(book, chapter, first, last):
    if first > last:
        raise FormatError("Invalid verse range %s %d:%d-%d" %
                          (book, chapter, first, last))
    return [Reference(book, chapter, str(v)) for v in range(first, last + 1)]


def parse_reference_range(text):
    """Parses either a single reference ("Gen 1:1") or a numeric verse range
    within one chapter ("Gen 1:1-5"), returning the list of references it
    covers.
    """
    m = _range_re.match(text)
    if m:
        return expand_verse_range(m.group(1), int(m.group(2)),
                                  int(m.group(3)), int(m.group(4)))
    return [parse_reference(text)]


def consecutive_runs(references):
    """Splits a sequence of references into runs of consecutive numbered
    verses of the same chapter, preserving order.
    """
    runs = []
    for reference in references:
        if runs and runs[-1][-1].next_verse() == reference:
            runs[-1].append(reference)
        else:
            runs.append([reference])
    return runs


def format_run(run):
    if len(run) == 1:
        return str(run[0])
    return '%s-%s' % (run[0], run[-1].verse)
