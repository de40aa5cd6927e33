import pytest

from versemap.errors import FormatError
from versemap.reference import (Reference, consecutive_runs, format_run,
                                parse_reference, parse_reference_range)


def test_parse_and_format():
    ref = parse_reference('1Sam 3:12a')
    assert ref == Reference('1Sam', 3, '12a')
    assert str(ref) == '1Sam 3:12a'


def test_structural_equality():
    assert Reference('Gen', 1, '1') == parse_reference('Gen 1:1')
    assert len({Reference('Gen', 1, '1'), parse_reference('Gen 1:1')}) == 1


@pytest.mark.parametrize('text', ['Gen 1', 'Gen1:1', 'Gen 1:1-2', 'Gen a:1',
                                  'Gen  1:1', '', '=Gen 1:1'])
def test_parse_malformed(text):
    with pytest.raises(FormatError):
        parse_reference(text)


def test_next_verse():
    assert Reference('Gen', 1, '9').next_verse() == Reference('Gen', 1, '10')
    assert Reference('Gen', 1, '3a').next_verse() is None
    assert Reference('Gen', 1, '03').next_verse() is None


def test_parse_range():
    assert parse_reference_range('Ps 3:1-3') == [
        Reference('Ps', 3, '1'), Reference('Ps', 3, '2'),
        Reference('Ps', 3, '3')]
    assert parse_reference_range('Ps 3:1') == [Reference('Ps', 3, '1')]
    with pytest.raises(FormatError):
        parse_reference_range('Ps 3:3-1')


def test_runs():
    refs = [parse_reference(r) for r in
            ['Gen 1:1', 'Gen 1:2', 'Gen 1:2a', 'Gen 2:3', 'Gen 2:4']]
    runs = consecutive_runs(refs)
    assert [format_run(run) for run in runs] == [
        'Gen 1:1-2', 'Gen 1:2a', 'Gen 2:3-4']
