import io

import pytest

from versemap.errors import FormatError, IntegrityError
from versemap.mapping import VersificationMapping
from versemap.reference import parse_reference
from versemap.versification import Versification


def refs(*texts):
    return [parse_reference(t) for t in texts]


@pytest.fixture
def kjv():
    return Versification.from_verse_sets('KJV', None, ['Gen 1:1-5 2:1-3'])


@pytest.fixture
def heb():
    return Versification.from_verse_sets('HEB', None, ['Gen 1:1-6 2:1-2'])


def test_single_and_list_rules(kjv, heb):
    m = VersificationMapping.from_rules(kjv, heb, [
        'Gen 1:1 = Gen 1:1',
        'Gen 1:2 = Gen 1:2-3, Gen 2:1',
    ])
    assert m.source is kjv
    assert m.target is heb
    assert m.lookup(parse_reference('Gen 1:1')) == refs('Gen 1:1')
    assert m.lookup(parse_reference('Gen 1:2')) == refs(
        'Gen 1:2', 'Gen 1:3', 'Gen 2:1')
    assert m.lookup(parse_reference('Gen 1:3')) == []
    assert len(m) == 2


def test_range_rule_pairs_verses(kjv, heb):
    m = VersificationMapping.from_rules(kjv, heb, ['Gen 1:1-5 = Gen 1:2-6'])
    for verse in range(1, 6):
        assert m.lookup(parse_reference('Gen 1:%d' % verse)) == refs(
            'Gen 1:%d' % (verse + 1))


def test_lookup_returns_copy(kjv, heb):
    m = VersificationMapping.from_rules(kjv, heb, ['Gen 1:1 = Gen 1:1'])
    m.lookup(parse_reference('Gen 1:1')).clear()
    assert m.lookup(parse_reference('Gen 1:1')) == refs('Gen 1:1')


@pytest.mark.parametrize('rule', [
    'Gen 1:1',
    'Gen 1:1 =',
    'Gen 1:1 = ',
    'Gen 1:1-3 = Gen 1:1-2',
    'Gen 1:1-2 = Gen 1:1, Gen 1:2',
    'Gen 1:1 = Gen 1:1,Gen 1:2',
])
def test_malformed_rules(kjv, heb, rule):
    with pytest.raises(FormatError):
        VersificationMapping.from_rules(kjv, heb, [rule])


def test_duplicate_source(kjv, heb):
    with pytest.raises(FormatError):
        VersificationMapping.from_rules(kjv, heb, [
            'Gen 1:1-2 = Gen 1:1-2', 'Gen 1:2 = Gen 1:3'])


def test_unknown_references(kjv, heb):
    with pytest.raises(IntegrityError):
        VersificationMapping.from_rules(kjv, heb, ['Gen 1:6 = Gen 1:6'])
    with pytest.raises(IntegrityError):
        VersificationMapping.from_rules(kjv, heb, ['Gen 2:3 = Gen 2:3'])


def test_build_orders_and_drops_empty(kjv, heb):
    table = {
        parse_reference('Gen 2:1'): refs('Gen 2:1'),
        parse_reference('Gen 1:1'): refs('Gen 1:1'),
        parse_reference('Gen 1:2'): [],
    }
    m = VersificationMapping.build(kjv, heb, table)
    assert [ref for (ref, _) in m.items()] == refs('Gen 1:1', 'Gen 2:1')


def test_dump_rules(kjv, heb):
    rules = [
        'Gen 1:1-3 = Gen 1:2-4',
        'Gen 1:4 = Gen 1:4',
        'Gen 1:5 = Gen 1:5-6, Gen 2:2',
        'Gen 2:1-2 = Gen 2:1-2',
    ]
    m = VersificationMapping.from_rules(kjv, heb, rules)
    out = io.StringIO()
    m.dump_rules(out)
    assert out.getvalue() == ''.join(' %s\n' % rule for rule in rules)


def test_dump_orders_by_source(kjv, heb):
    m = VersificationMapping.from_rules(kjv, heb, [
        'Gen 2:1 = Gen 2:1', 'Gen 1:1 = Gen 1:1', 'Gen 1:2 = Gen 1:2'])
    assert list(m.rule_lines()) == ['Gen 1:1-2 = Gen 1:1-2',
                                    'Gen 2:1 = Gen 2:1']


def test_to_dict(kjv, heb):
    m = VersificationMapping.from_rules(kjv, heb, ['Gen 1:1 = Gen 1:1-2'])
    assert m.to_dict() == {
        'from': 'KJV',
        'to': 'HEB',
        'verses': {'Gen 1:1': ['Gen 1:1', 'Gen 1:2']},
    }
