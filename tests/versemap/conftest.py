import pytest

import flat_test_data


@pytest.fixture
def vset():
    return flat_test_data.load(flat_test_data.sample_set)


@pytest.fixture
def single_vset():
    return flat_test_data.load(flat_test_data.single_mapping_set)


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / 'sample.txt'
    path.write_text(flat_test_data.sample_set, encoding='utf-8')
    return path
