from collections import namedtuple
import enum
import io
import logging
import re

from .errors import (ConflictError, FormatError, IntegrityError,
                     NotFoundError)
from .mapping import VersificationMapping
from .versification import Versification


logger = logging.getLogger(__name__)

HEADER = 'BibleMultiConverter-VersificationSet-1.0'

_index_re = re.compile(r'[+-]?\d+$')


class AutoMode(enum.Enum):
    """Selects when an automatic (index 0) lookup returns a stored mapping
    directly instead of merging the candidates.

    GLOBAL uses the stored mapping when the whole set holds exactly one
    mapping, which is the behaviour of existing versification set files.
    PAIR uses it when exactly one candidate matches the requested pair.
    """
    GLOBAL = 'global'
    PAIR = 'pair'


VersificationHeader = namedtuple('VersificationHeader', 'name description')
MappingHeader = namedtuple('MappingHeader', 'from_name to_name')


def classify_header(line):
    if '>' in line and ' ' not in line:
        from_name, to_name = line.split('>', 1)
        if not from_name or not to_name:
            raise FormatError("Invalid mapping header: %r" % (line,))
        return MappingHeader(from_name, to_name)
    parts = line.split(' ', 1)
    return VersificationHeader(parts[0], parts[1] if len(parts) > 1 else None)


def _records(lines):
    """Groups the lines following the signature into (header, rules) pairs."""
    header = None
    rules = []
    for line in lines:
        if line.startswith(' '):
            if header is None:
                raise FormatError("Rule line without header: %r" % (line,))
            rules.append(line[1:])
            continue
        if header is not None:
            yield header, rules
        header = line
        rules = []
    if header is not None:
        yield header, rules


def _strip_newline(line):
    return line.rstrip('\r\n')


class VersificationSet:
    """A set of versifications and mappings between them, stored together in
    a single file.
    """

    def __init__(self, path=None):
        self._versifications = []
        self._mappings = []
        if path is not None:
            with open(path, encoding='utf-8') as f:
                self.load_from(f)

    @property
    def versifications(self):
        return tuple(self._versifications)

    @property
    def mappings(self):
        return tuple(self._mappings)

    def add_versification(self, versification):
        self._versifications.append(versification)

    def add_mapping(self, mapping):
        self._mappings.append(mapping)

    def find_versification(self, name):
        for versification in self._versifications:
            if versification.name == name:
                return versification
        for versification in self._versifications:
            if name in versification.aliases:
                return versification
        raise NotFoundError("Versification %s not found" % (name,))

    def candidates(self, from_name, to_name):
        return [mapping for mapping in self._mappings
                if mapping.source.name == from_name and
                mapping.target.name == to_name]

    def find_mapping_by_key(self, key, auto_mode=AutoMode.GLOBAL):
        """Resolves a mapping key of the form FROM/TO or FROM/TO/NUMBER."""
        parts = key.split('/')
        # Trailing empty segments are ignored, so FROM/TO/ means FROM/TO.
        while parts and not parts[-1]:
            parts.pop()
        if len(parts) == 2:
            return self.find_mapping(parts[0], parts[1], 0, auto_mode)
        if len(parts) == 3:
            if not _index_re.match(parts[2]):
                raise FormatError("Invalid mapping number in %s" % (key,))
            return self.find_mapping(parts[0], parts[1], int(parts[2]),
                                     auto_mode)
        raise FormatError("Invalid mapping format: %s" % (key,))

    def find_mapping(self, from_name, to_name, number=0,
                     auto_mode=AutoMode.GLOBAL):
        """Returns the mapping from one versification to another.

        A number of -1 builds a mapping of all the verses that exist in both
        versifications onto themselves.  A positive number selects the
        stored mapping at that (one-based) position among those for the pair.
        Zero merges all stored mappings for the pair into the mapping they
        agree on, unless auto_mode says that a single stored mapping can be
        used as it is.
        """
        source = self.find_versification(from_name)
        target = self.find_versification(to_name)
        if number == -1:
            logger.debug("Building identity mapping %s>%s", source.name,
                         target.name)
            table = {ref: [ref] for ref in source if ref in target}
            return VersificationMapping.build(source, target, table)

        candidates = self.candidates(from_name, to_name)
        if not candidates:
            raise NotFoundError("No mapping found from %s to %s" %
                                (from_name, to_name))
        if number == 0:
            if auto_mode is AutoMode.PAIR:
                single = len(candidates) == 1
            else:
                single = len(self._mappings) == 1
            if not single:
                return self._best_match(from_name, to_name, source, target,
                                        candidates)
            number = 1
        if number < 1 or number > len(candidates):
            raise NotFoundError("Mapping %d from %s to %s does not exist." %
                                (number, from_name, to_name))
        return candidates[number - 1]

    @staticmethod
    def _best_match(from_name, to_name, source, target, candidates):
        logger.debug("Merging %d mappings from %s to %s", len(candidates),
                     from_name, to_name)
        table = {}
        for reference in source:
            best = None
            for candidate in candidates:
                current = candidate.lookup(reference) or None
                if best is None:
                    best = None if current is None else list(current)
                elif current is not None:
                    best = [ref for ref in best if ref in current]
                    if not best:
                        raise ConflictError(from_name, to_name, reference)
            if best is not None:
                table[reference] = best
        return VersificationMapping.build(source, target, table)

    def load_from(self, lines):
        lines = iter(lines)
        signature = _strip_newline(next(lines, ''))
        if signature != HEADER:
            raise FormatError("Invalid file signature: %s" % (signature,))
        stripped = (_strip_newline(line) for line in lines)
        for (header, rules) in _records(stripped):
            self._load_record(classify_header(header), rules)

    def _load_record(self, header, rules):
        if isinstance(header, MappingHeader):
            source = self.find_versification(header.from_name)
            target = self.find_versification(header.to_name)
            mapping = VersificationMapping.from_rules(source, target, rules)
            logger.debug("Loaded mapping %s>%s (%d verses)", source.name,
                         target.name, len(mapping))
            self._mappings.append(mapping)
        else:
            versification = Versification.from_verse_sets(
                header.name, header.description, rules)
            logger.debug("Loaded versification %s (%d verses)",
                         versification.name, versification.verse_count)
            self._versifications.append(versification)

    def validate(self):
        names = set()
        for versification in self._versifications:
            if versification.name in names:
                raise IntegrityError("Duplicate versification name: %s" %
                                     (versification.name,))
            names.add(versification.name)
        for mapping in self._mappings:
            for endpoint in (mapping.source, mapping.target):
                if not any(v is endpoint for v in self._versifications):
                    raise IntegrityError("Mapping references unknown "
                                         "versification %s" % (endpoint.name,))
        # XXX: Aliases are only reported, not rejected, when they shadow
        # another versification's name.
        for versification in self._versifications:
            for alias in versification.aliases:
                if alias in names:
                    logger.warning("Alias %s of %s is hidden by the "
                                   "versification of that name", alias,
                                   versification.name)

    def dumps(self):
        """Validates the set and returns its file contents as a string."""
        self.validate()
        buf = io.StringIO()
        buf.write(HEADER + '\n')
        for versification in self._versifications:
            buf.write(versification.name)
            if versification.description is not None:
                buf.write(' ' + versification.description)
            buf.write('\n')
            for alias in versification.aliases:
                buf.write(' =' + alias + '\n')
            versification.dump_verse_sets(buf)
        for mapping in self._mappings:
            buf.write(mapping.source.name + '>' + mapping.target.name + '\n')
            mapping.dump_rules(buf)
        return buf.getvalue()

    def save_to(self, writer):
        writer.write(self.dumps())
        logger.info("Saved %d versifications and %d mappings",
                    len(self._versifications), len(self._mappings))

    def save(self, path):
        contents = self.dumps()
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(contents)
        logger.info("Saved %d versifications and %d mappings to %s",
                    len(self._versifications), len(self._mappings), path)
