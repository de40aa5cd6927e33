import itertools
import re

from .errors import FormatError
from .reference import (Reference, consecutive_runs, expand_verse_range,
                        is_valid_book, is_valid_reference, is_valid_verse)


_name_re = re.compile(r'[A-Za-z0-9_.-]+$')
_segment_re = re.compile(r'(\d+):(\S+)$')
_numeric_range_re = re.compile(r'(\d+)-(\d+)$')


def is_valid_name(name):
    return bool(_name_re.match(name))


class Versification:
    """A named, ordered list of verse references.

    The order of the references is the canonical order of the versification,
    and their number is its verse count.
    """

    def __init__(self, name, description=None, aliases=None, references=()):
        if not is_valid_name(name):
            raise FormatError("Invalid versification name: %r" % (name,))
        if description is not None and ('\n' in description or
                                        '\r' in description):
            raise FormatError("Invalid description for versification %s" %
                              (name,))
        aliases = tuple(aliases or ())
        for alias in aliases:
            if not is_valid_name(alias):
                raise FormatError("Invalid alias %r for versification %s" %
                                  (alias, name))

        self._name = name
        self._description = description
        self._aliases = aliases
        self._references = tuple(references)
        self._index = {}
        for (i, reference) in enumerate(self._references):
            if not is_valid_reference(reference):
                raise FormatError("Invalid reference %r in versification %s"
                                  % (reference, name))
            if reference in self._index:
                raise FormatError("Duplicate reference %s in versification %s"
                                  % (reference, name))
            self._index[reference] = i

    def __repr__(self):
        return '<Versification %s (%d verses)>' % (self._name,
                                                   len(self._references))

    @property
    def name(self):
        return self._name

    @property
    def description(self):
        return self._description

    @property
    def aliases(self):
        return self._aliases

    @property
    def verse_count(self):
        return len(self._references)

    def __len__(self):
        return len(self._references)

    def __getitem__(self, i):
        return self._references[i]

    def __iter__(self):
        return iter(self._references)

    def __contains__(self, reference):
        return reference in self._index

    def index_of(self, reference):
        return self._index[reference]

    @classmethod
    def from_verse_sets(cls, name, description, rules):
        aliases = []
        references = []
        for rule in rules:
            if rule.startswith('='):
                aliases.append(rule[1:])
            else:
                references.extend(cls._parse_verse_set(name, rule))
        return cls(name, description, aliases, references)

    @staticmethod
    def _parse_verse_set(name, rule):
        components = rule.split(' ')
        if len(components) < 2 or not is_valid_book(components[0]):
            raise FormatError("Invalid verse set in versification %s: %r" %
                              (name, rule))
        book = components[0]
        references = []
        for segment in components[1:]:
            m = _segment_re.match(segment)
            if not m:
                raise FormatError("Invalid chapter segment in versification "
                                  "%s: %r" % (name, rule))
            chapter = int(m.group(1))
            for item in m.group(2).split(','):
                verse_range = _numeric_range_re.match(item)
                if verse_range:
                    references.extend(expand_verse_range(
                        book, chapter, int(verse_range.group(1)),
                        int(verse_range.group(2))))
                elif is_valid_verse(item):
                    references.append(Reference(book, chapter, item))
                else:
                    raise FormatError("Invalid verse %r in versification %s"
                                      % (item, name))
        return references

    def verse_set_lines(self):
        """Yields the rule lines describing the references, without the
        leading indentation.
        """
        by_book = itertools.groupby(self._references, lambda r: r.book)
        for (book, book_refs) in by_book:
            segments = []
            by_chapter = itertools.groupby(book_refs, lambda r: r.chapter)
            for (chapter, chapter_refs) in by_chapter:
                items = []
                for run in consecutive_runs(chapter_refs):
                    if len(run) == 1:
                        items.append(run[0].verse)
                    else:
                        items.append('%s-%s' % (run[0].verse, run[-1].verse))
                segments.append('%d:%s' % (chapter, ','.join(items)))
            yield ' '.join([book] + segments)

    def dump_verse_sets(self, writer):
        for line in self.verse_set_lines():
            writer.write(' ' + line + '\n')
