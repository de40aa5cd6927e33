from .errors import FormatError, IntegrityError
from .reference import consecutive_runs, format_run, parse_reference_range


class VersificationMapping:
    """Maps references of one versification to lists of references of
    another.  Instances are immutable; use build() or from_rules() to create
    them.
    """

    def __init__(self, source, target, table):
        self._source = source
        self._target = target
        # Entries are kept in source order.
        ordered = sorted(table.items(), key=lambda kv: source.index_of(kv[0]))
        self._table = {ref: tuple(targets) for (ref, targets) in ordered
                       if targets}

    def __repr__(self):
        return '<VersificationMapping %s>%s (%d verses)>' % (
            self._source.name, self._target.name, len(self._table))

    @property
    def source(self):
        return self._source

    @property
    def target(self):
        return self._target

    def __len__(self):
        return len(self._table)

    def lookup(self, reference):
        """Returns a new list of the references that the specified source
        reference maps to, which is empty when it is not mapped.
        """
        return list(self._table.get(reference, ()))

    def items(self):
        return self._table.items()

    @classmethod
    def build(cls, source, target, table):
        for (reference, targets) in table.items():
            if reference not in source:
                raise IntegrityError("Reference %s is not part of "
                                     "versification %s" %
                                     (reference, source.name))
            for target_reference in targets:
                if target_reference not in target:
                    raise IntegrityError("Reference %s is not part of "
                                         "versification %s" %
                                         (target_reference, target.name))
        return cls(source, target, table)

    @classmethod
    def from_rules(cls, source, target, rules):
        table = {}
        for rule in rules:
            for (reference, targets) in cls._parse_rule(source, target, rule):
                if reference in table:
                    raise FormatError("Duplicate mapping for %s in %s>%s" %
                                      (reference, source.name, target.name))
                table[reference] = targets
        return cls.build(source, target, table)

    @staticmethod
    def _parse_rule(source, target, rule):
        if ' = ' not in rule:
            raise FormatError("Invalid mapping rule in %s>%s: %r" %
                              (source.name, target.name, rule))
        lhs, rhs = rule.split(' = ', 1)
        sources = parse_reference_range(lhs)
        if not rhs.strip():
            raise FormatError("Empty mapping for %s in %s>%s" %
                              (lhs, source.name, target.name))
        target_specs = [parse_reference_range(spec)
                        for spec in rhs.split(', ')]

        if len(sources) == 1:
            return [(sources[0], [ref for spec in target_specs
                                  for ref in spec])]
        if len(target_specs) != 1 or len(target_specs[0]) != len(sources):
            raise FormatError("Range %s must map to a single range of equal "
                              "length in %s>%s" %
                              (lhs, source.name, target.name))
        return [(ref, [target_ref])
                for (ref, target_ref) in zip(sources, target_specs[0])]

    def rule_lines(self):
        pending_sources = []
        pending_targets = []

        def flush():
            if pending_sources:
                yield '%s = %s' % (format_run(pending_sources),
                                   format_run(pending_targets))
                del pending_sources[:]
                del pending_targets[:]

        for (reference, targets) in self._table.items():
            if len(targets) == 1:
                if (pending_sources and
                        pending_sources[-1].next_verse() == reference and
                        pending_targets[-1].next_verse() == targets[0]):
                    pending_sources.append(reference)
                    pending_targets.append(targets[0])
                    continue
                yield from flush()
                pending_sources.append(reference)
                pending_targets.append(targets[0])
            else:
                yield from flush()
                yield '%s = %s' % (reference, ', '.join(
                    format_run(run) for run in consecutive_runs(targets)))
        yield from flush()

    def dump_rules(self, writer):
        for line in self.rule_lines():
            writer.write(' ' + line + '\n')

    def to_dict(self):
        return {
            'from': self._source.name,
            'to': self._target.name,
            'verses': {str(ref): [str(t) for t in targets]
                       for (ref, targets) in self._table.items()},
        }
